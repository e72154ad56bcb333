from cms_admin.services.media_preview import format_file_size, is_image, resolve_media


MEDIA = [
    {"id": 1, "name": "a.PNG"},
    {"id": "2", "name": "b.pdf"},
    {"name": "no-id.gif"},
]


def test_resolve_media_keeps_requested_order_and_drops_unknown():
    assert [m["name"] for m in resolve_media(["2", 1, "9"], MEDIA)] == ["b.pdf", "a.PNG"]
    assert [m["name"] for m in resolve_media("1", MEDIA)] == ["a.PNG"]
    assert resolve_media(None, MEDIA) == []
    assert resolve_media([], MEDIA) == []


def test_is_image_by_extension():
    assert is_image("a.PNG")
    assert is_image("vector.svg")
    assert not is_image("b.pdf")
    assert not is_image("")
    assert not is_image(None)


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(None) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(10 * 1024 * 1024) == "10 MB"
    assert format_file_size(3 * 1024 ** 4) == "3072 GB"
