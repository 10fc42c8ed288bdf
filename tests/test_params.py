from mandelbrot_tiles import RenderConfig, config_from_params


def test_missing_parameters_use_defaults():
    assert config_from_params({}) == RenderConfig()
    assert config_from_params(None) == RenderConfig()


def test_parameters_are_parsed():
    config = config_from_params(
        {
            "posX": "-0.75",
            "posY": "0.1",
            "height": "0.5",
            "width": "640",
            "height_px": "480",
            "maxIter": "250",
            "samples": "8",
            "numBlocks": "16",
            "numThreads": "4",
        }
    )
    assert config == RenderConfig(
        pos_x=-0.75,
        pos_y=0.1,
        height=0.5,
        img_width=640,
        img_height=480,
        max_iter=250,
        samples=8,
        num_blocks=16,
        num_threads=4,
    )


def test_malformed_values_fall_back_to_defaults():
    config = config_from_params({"width": "wide", "posX": "left", "samples": "2.5"})
    assert config.img_width == 1024
    assert config.pos_x == -2.0
    assert config.samples == 50


def test_unknown_parameters_are_ignored():
    assert config_from_params({"colour": "red"}) == RenderConfig()


def test_zero_is_parsed_not_replaced():
    assert config_from_params({"samples": "0"}).samples == 0
