import pytest

from mediafetch.common.ytdlp.ytdlp_helpers import (
    build_info_cmd,
    build_stream_cmd,
    loads_ytdlp,
    parse_raw_format,
    parse_ytdlp,
)
from mediafetch.domain.errors import ExtractionError, ParseError


def test_build_info_cmd_flags():
    cmd = build_info_cmd("https://youtu.be/x")
    assert cmd[0] == "yt-dlp"
    assert "--dump-single-json" in cmd
    assert "--ignore-errors" in cmd
    assert "--check-all-formats" in cmd
    assert "--quiet" in cmd
    assert cmd[-2:] == ["--", "https://youtu.be/x"]


def test_build_info_cmd_options():
    cmd = build_info_cmd("u", bin="/x/yt-dlp", check_all_formats=False, extra_args=["--proxy", "p"])
    assert cmd[0] == "/x/yt-dlp"
    assert "--check-all-formats" not in cmd
    assert cmd[-4:] == ["--proxy", "p", "--", "u"]


def test_build_stream_cmd_writes_one_format_to_stdout():
    cmd = build_stream_cmd("https://youtu.be/x", "137")
    i = cmd.index("-f")
    assert cmd[i + 1] == "137"
    j = cmd.index("-o")
    assert cmd[j + 1] == "-"
    assert cmd[-2:] == ["--", "https://youtu.be/x"]


def test_parse_ytdlp_document(ytdlp_document):
    res = parse_ytdlp(ytdlp_document, "https://youtu.be/dQw4w9WgXcQ")
    assert res.url == "https://youtu.be/dQw4w9WgXcQ"
    assert res.title == "Never Gonna Give You Up"
    assert res.duration == 212.0
    assert res.original_url.startswith("https://www.youtube.com/")
    assert [f.format_id for f in res.formats][:3] == ["sb0", "139", "140"]

    by_id = {f.format_id: f for f in res.formats}
    f18 = by_id["18"]
    assert f18.filesize == 0
    assert f18.filesize_approx == 8300000
    assert (f18.width, f18.height, f18.fps) == (640, 360, 25.0)
    # missing numbers read as zero, missing strings as empty
    assert by_id["233"].vbr == 0.0
    assert by_id["233"].filesize == 0
    assert by_id["140"].width == 0


def test_parse_raw_format_tolerates_junk_numbers():
    f = parse_raw_format({"format_id": 22, "width": "abc", "fps": None, "vbr": "1.5"})
    assert f.format_id == "22"
    assert f.width == 0
    assert f.fps == 0.0
    assert f.vbr == 1.5


@pytest.mark.parametrize("entry", [None, "137", {"ext": "mp4"}, {"format_id": ""}, {"format_id": True}])
def test_parse_raw_format_rejects_bad_entries(entry):
    with pytest.raises(ParseError):
        parse_raw_format(entry, 3)


def test_parse_ytdlp_shape_errors():
    with pytest.raises(ParseError):
        parse_ytdlp([], "u")  # type: ignore[arg-type]
    with pytest.raises(ParseError):
        parse_ytdlp({"title": "no formats"}, "u")


def test_loads_ytdlp_invalid_json():
    with pytest.raises(ParseError) as ei:
        loads_ytdlp("not json", "u")
    # ParseError is an ExtractionError and keeps the offending output
    assert isinstance(ei.value, ExtractionError)
    assert ei.value.stderr == "not json"


def test_original_url_falls_back_to_request_url():
    res = loads_ytdlp('{"formats": []}', "https://vimeo.com/1")
    assert res.original_url == "https://vimeo.com/1"
    assert res.formats == ()


def test_non_finite_numbers_read_as_zero():
    doc = (
        '{"title": "t", "formats": [{"format_id": "1", "ext": "mp4", "vcodec": "avc1", "acodec": "none",'
        ' "filesize": Infinity, "filesize_approx": -Infinity, "fps": NaN, "vbr": 1, "width": Infinity}]}'
    )
    res = loads_ytdlp(doc, "https://youtu.be/x")
    f = res.formats[0]
    assert f.filesize == 0
    assert f.filesize_approx == 0
    assert f.fps == 0.0
    assert f.width == 0
    assert f.vbr == 1.0


def test_non_finite_duration_reads_as_zero():
    assert loads_ytdlp('{"duration": Infinity, "formats": []}', "u").duration == 0.0
