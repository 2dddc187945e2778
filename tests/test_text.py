from instacomment.text import (
    collapse_whitespace,
    decode_entities,
    normalize_caption,
    strip_author_prefix,
)


def test_strips_author_prefix():
    assert strip_author_prefix("user123: Great day!") == "Great day!"


def test_only_first_colon_is_a_prefix():
    assert strip_author_prefix("user: time is 10:30") == "time is 10:30"


def test_without_colon_text_is_trimmed():
    assert strip_author_prefix("  Great day!  ") == "Great day!"


def test_decodes_named_entities():
    assert decode_entities("&amp;&lt;&gt;&quot;&#39;") == "&<>\"'"


def test_decodes_numeric_references():
    assert decode_entities("&#65;") == "A"
    assert decode_entities("&#x41;") == "A"
    assert decode_entities("&#xAC00;&#44032;") == "가가"


def test_decoding_is_single_pass():
    assert decode_entities("&amp;lt;") == "&lt;"


def test_decoding_is_idempotent_on_plain_text():
    text = "Tom & Jerry <3 \"quotes\" 'and' 100% #tags"
    assert decode_entities(text) == text
    assert decode_entities(decode_entities("&lt;b&gt;")) == "<b>"


def test_invalid_code_points_are_left_alone():
    assert decode_entities("&#99999999;") == "&#99999999;"
    assert decode_entities("&#xD800;") == "&#xD800;"


def test_collapse_whitespace():
    assert collapse_whitespace("  a \n\n b\t c ") == "a b c"


def test_normalize_caption():
    raw = "12 likes, 3 comments - user on May 1: &quot;Sunny&#33;&quot;\n\nday"
    assert normalize_caption(raw) == '"Sunny!"\n\nday'
    assert normalize_caption(raw, collapse=True) == '"Sunny!" day'


def test_normalize_caption_is_total():
    assert normalize_caption("") == ""
    assert normalize_caption(None) == ""
    assert normalize_caption(":") == ""
