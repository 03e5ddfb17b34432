"""
Tests for CSV parsing and record derivation.
"""

import dataclasses
import logging

import pytest

from post_insights.data_prep import (
    NO_CAPTION,
    UNKNOWN_TYPE,
    ZERO_RATE,
    InvalidInputError,
    PostRecord,
    coerce_integer,
    parse_header,
    parse_posts,
    read_upload,
    split_row,
)


class TestCoerceInteger:
    """Best-effort integer coercion."""

    def test_grouping_commas(self):
        assert coerce_integer("1,234") == 1234
        assert coerce_integer("12,345,678") == 12345678

    def test_empty_and_missing(self):
        assert coerce_integer("") == 0
        assert coerce_integer(None) == 0

    def test_garbage_degrades_to_zero(self):
        assert coerce_integer("abc") == 0
        assert coerce_integer("n/a") == 0

    def test_leading_digits(self):
        assert coerce_integer(" 42 ") == 42
        assert coerce_integer("12.7") == 12

    def test_only_ascii_digits(self):
        assert coerce_integer("\u0663") == 0
        assert coerce_integer("\uff11\uff12") == 0


class TestTokenizer:
    """Header and row splitting."""

    def test_quoted_comma_stays_in_field(self):
        assert split_row('"a, b",c') == ["a, b", "c"]

    def test_fields_are_trimmed_and_unquoted(self):
        assert split_row(" x , 'y' ,z ") == ["x", "y", "z"]

    def test_single_quotes_do_not_protect_commas(self):
        assert split_row("'a, b',c") == ["a", "b", "c"]

    def test_unterminated_quote_swallows_rest_of_line(self):
        assert split_row('a,"b,c,d') == ["a", "b,c,d"]

    def test_trailing_empty_field(self):
        assert split_row("a,b,") == ["a", "b", ""]

    def test_header_strips_edge_quotes(self):
        assert parse_header("\"post_id\", 'likes' ,reach") == ["post_id", "likes", "reach"]


class TestParsePosts:
    """Full text-to-records parsing."""

    def test_one_record_per_non_blank_data_line(self, sample_csv):
        posts = parse_posts(sample_csv)
        assert len(posts) == 5
        assert [p.raw_fields["post_id"] for p in posts] == ["1", "2", "3", "4", "5"]

    def test_derived_fields(self):
        posts = parse_posts("likes,comments,shares,saves,reach\n10,5,2,3,200\n")
        post = posts[0]
        assert post.engagement == 20
        assert post.engagement_rate == "10.00"
        assert post.engagement_rate_value == 10.0

    def test_zero_reach_gives_zero_rate(self):
        post = parse_posts("likes,reach\n500,0\n")[0]
        assert post.engagement == 500
        assert post.engagement_rate == ZERO_RATE

    def test_rate_has_two_decimals(self):
        assert parse_posts("likes,reach\n1,3\n")[0].engagement_rate == "33.33"

    def test_quoted_counts_with_grouping(self, posts):
        assert posts[1].likes == 1200
        assert posts[1].engagement == 1300
        assert posts[0].caption == "Sunset, beach"

    def test_short_rows_are_padded(self):
        post = parse_posts("a,b,c\n1\n")[0]
        assert dict(post.raw_fields) == {"a": "1", "b": "", "c": ""}

    def test_long_rows_are_truncated(self):
        post = parse_posts("a,b\n1,2,3,4\n")[0]
        assert dict(post.raw_fields) == {"a": "1", "b": "2"}

    def test_every_record_has_header_keys(self, posts):
        keys = {tuple(p.raw_fields) for p in posts}
        assert len(keys) == 1

    def test_crlf_line_endings(self):
        post = parse_posts("likes,reach\r\n10,100\r\n")[0]
        assert post.likes == 10
        assert post.reach == 100
        assert post.engagement_rate == "10.00"

    def test_unrecognized_columns_are_kept(self, posts):
        assert posts[0].raw_fields["post_id"] == "1"

    def test_header_casing_is_preserved(self):
        post = parse_posts("Likes,Comments\n10,5\n")[0]
        assert dict(post.raw_fields) == {"Likes": "10", "Comments": "5"}
        assert post.likes == 0
        assert post.comments == 0

    def test_content_type_capitalized(self):
        posts = parse_posts("media_type,type\ncarousel_album,x\n,reel\n,\niMAGE,\n")
        assert [p.content_type for p in posts] == ["Carousel_album", "Reel", UNKNOWN_TYPE, "IMAGE"]

    def test_caption_fallbacks(self, posts):
        assert posts[4].caption == NO_CAPTION
        assert parse_posts("Caption,likes\nHello,1\n")[0].caption == "Hello"

    @pytest.mark.parametrize("text", ["", "   \n\n", "likes,reach\n", "likes,reach\n   \n"])
    def test_missing_header_or_rows(self, text):
        with pytest.raises(InvalidInputError, match="empty or invalid"):
            parse_posts(text)

    def test_invalid_input_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_posts("only-a-header")

    def test_leading_bom_is_dropped(self):
        post = parse_posts("\ufefflikes,reach\n10,100\n")[0]
        assert list(post.raw_fields) == ["likes", "reach"]
        assert post.likes == 10

    def test_logs_record_count(self, sample_csv, caplog):
        caplog.set_level(logging.INFO, logger="post_insights.data_prep")
        parse_posts(sample_csv)
        assert "Parsed 5 posts" in caplog.text


class TestPostRecord:
    """Record immutability."""

    def test_frozen(self, posts):
        with pytest.raises(dataclasses.FrozenInstanceError):
            posts[0].likes = 1

    def test_raw_fields_read_only(self, posts):
        with pytest.raises(TypeError):
            posts[0].raw_fields["likes"] = "1"

    def test_engagement_follows_counts(self):
        post = PostRecord.from_raw({"likes": "1", "comments": "2", "shares": "3", "saves": "4"})
        assert post.engagement == 10
        assert dataclasses.replace(post, saves=0).engagement == 6


class TestReadUpload:
    def test_strips_bom(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufefflikes,reach\n10,100\n".encode("utf-8"))
        text = read_upload(str(path))
        assert text.startswith("likes")
        assert parse_posts(text)[0].likes == 10
