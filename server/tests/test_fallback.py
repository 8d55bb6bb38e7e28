import random

from gemchat.services.fallback import IMAGE_FALLBACK_TEMPLATE, TEXT_FALLBACK_TEMPLATES, fallback_response


def test_image_request_uses_image_template():
    text = fallback_response("a castle at dusk", is_image=True)

    assert text == IMAGE_FALLBACK_TEMPLATE.format(prompt="a castle at dusk")


def test_text_request_echoes_prompt_from_fixed_set():
    expected = {t.format(prompt="weather?") for t in TEXT_FALLBACK_TEMPLATES}

    for seed in range(10):
        text = fallback_response("weather?", rng=random.Random(seed))
        assert text in expected
        assert "weather?" in text


def test_same_seed_same_choice():
    first = fallback_response("hi", rng=random.Random(42))
    second = fallback_response("hi", rng=random.Random(42))

    assert first == second


def test_every_template_is_reachable():
    rng = random.Random(0)
    seen = {fallback_response("x", rng=rng) for _ in range(200)}

    assert len(seen) == len(TEXT_FALLBACK_TEMPLATES)
