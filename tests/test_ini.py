"""test suite for the INI document editor."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from maroon.domain.errors import ParseError
from maroon.storage.ini import IniDocument, set_section_key

AWS_CONFIG = """\
# managed by hand
[default]
region = us-east-1
output=json

[profile other]
region = eu-west-1
s3 =
    max_concurrent_requests = 20
    max_queue_size = 1000
; trailing comment
"""


class TestParsing:
    def test_render_is_lossless(self):
        doc = IniDocument.parse(AWS_CONFIG)
        assert doc.render() == AWS_CONFIG

    def test_empty_document(self):
        doc = IniDocument.parse("")
        assert doc.render() == ""
        assert doc.section_names() == []

    def test_section_names(self):
        doc = IniDocument.parse(AWS_CONFIG)
        assert doc.section_names() == ["default", "profile other"]
        assert doc.has_section("profile other")
        assert not doc.has_section("profile missing")

    def test_get_values(self):
        doc = IniDocument.parse(AWS_CONFIG)
        assert doc.get("default", "output") == "json"
        assert doc.get("profile other", "s3") == "\nmax_concurrent_requests = 20\nmax_queue_size = 1000"
        assert doc.get("default", "missing") is None
        assert doc.get("missing", "region") is None

    def test_items(self):
        doc = IniDocument.parse(AWS_CONFIG)
        assert doc.items("default") == {"region": "us-east-1", "output": "json"}

    def test_key_before_section(self):
        with pytest.raises(ParseError) as exc_info:
            IniDocument.parse("region = us-east-1\n[default]\n")
        assert exc_info.value.line == 1

    def test_garbage_line(self):
        with pytest.raises(ParseError, match="line 3"):
            IniDocument.parse("[default]\nregion = us-east-1\nnot a key value line\n")

    def test_unterminated_header(self):
        with pytest.raises(ParseError, match="Malformed section header"):
            IniDocument.parse("[default\nregion = us-east-1\n")

    def test_parse_error_includes_path(self):
        with pytest.raises(ParseError) as exc_info:
            IniDocument.parse("oops\n", Path("/tmp/config"))
        assert exc_info.value.path == Path("/tmp/config")


class TestSetSectionKey:
    def test_overwrite_existing_key(self):
        result = set_section_key(AWS_CONFIG, "default", "region", "us-west-2")
        assert "region = us-west-2\noutput=json\n" in result
        assert result.count("us-east-1") == 0

    def test_insert_new_key_after_last_key(self):
        result = set_section_key(AWS_CONFIG, "default", "cli_pager", "")
        assert "output=json\ncli_pager = \n\n[profile other]" in result

    def test_new_section_is_appended(self):
        result = set_section_key(AWS_CONFIG, "profile dev", "region", "us-east-2")
        assert result.startswith(AWS_CONFIG)
        assert result[len(AWS_CONFIG):] == "\n[profile dev]\nregion = us-east-2\n"

    def test_new_section_in_empty_document(self):
        assert set_section_key("", "default", "aws_access_key_id", "AKIA") == "[default]\naws_access_key_id = AKIA\n"

    def test_idempotence(self):
        once = set_section_key(AWS_CONFIG, "profile dev", "region", "us-east-2")
        twice = set_section_key(once, "profile dev", "region", "us-east-2")
        assert once == twice

        once = set_section_key(AWS_CONFIG, "default", "region", "us-east-1")
        assert set_section_key(once, "default", "region", "us-east-1") == once

    def test_section_isolation(self):
        document = "[other]\nb = 2\na = 1\n# note\nc=3\n\n[default]\naws_access_key_id = OLD\n"
        result = set_section_key(document, "default", "aws_access_key_id", "NEW")
        result = set_section_key(result, "default", "aws_session_token", "TOKEN")

        other = "[other]\nb = 2\na = 1\n# note\nc=3\n\n"
        assert result.startswith(other)
        assert result[len(other):] == "[default]\naws_access_key_id = NEW\naws_session_token = TOKEN\n"

    def test_overwrite_replaces_continuation_lines(self):
        result = set_section_key(AWS_CONFIG, "profile other", "s3", "disabled")
        assert "s3 = disabled\n; trailing comment\n" in result
        assert "max_queue_size" not in result

    def test_comment_inside_nested_value(self):
        document = (
            "[profile other]\n"
            "s3 =\n"
            "    # note\n"
            "    max_queue_size = 1000\n"
            "region = eu-west-1\n"
        )
        doc = IniDocument.parse(document)
        assert doc.get("profile other", "s3") == "\nmax_queue_size = 1000"
        assert list(doc.items("profile other")) == ["s3", "region"]

        result = set_section_key(document, "profile other", "s3", "disabled")
        assert result == "[profile other]\ns3 = disabled\nregion = eu-west-1\n"

    def test_missing_trailing_newline(self):
        result = set_section_key("[default]\nregion = us-east-1", "default", "output", "json")
        assert result == "[default]\nregion = us-east-1\noutput = json\n"

        result = set_section_key("[default]\nregion = us-east-1", "profile x", "region", "eu-west-1")
        assert result == "[default]\nregion = us-east-1\n\n[profile x]\nregion = eu-west-1\n"

    def test_crlf_preserved(self):
        document = "[default]\r\nregion = us-east-1\r\n"
        result = set_section_key(document, "default", "output", "json")
        assert result == "[default]\r\nregion = us-east-1\r\noutput = json\r\n"

    def test_colon_separator_key_is_matched(self):
        result = set_section_key("[default]\nregion: us-east-1\n", "default", "region", "eu-west-1")
        assert result == "[default]\nregion = eu-west-1\n"

    def test_multiline_value_rejected(self):
        doc = IniDocument.parse(AWS_CONFIG)
        with pytest.raises(ValueError):
            doc.set("default", "region", "us-east-1\n[injected]")

    def test_duplicate_sections_update_existing_key(self):
        document = "[default]\na = 1\n\n[default]\nb = 2\n"
        result = set_section_key(document, "default", "b", "3")
        assert result == "[default]\na = 1\n\n[default]\nb = 3\n"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
