import pytest
from pydantic import ValidationError

from cineblog.core.interfaces import Document
from cineblog.schemas.post import (
    MAX_BANNER_BYTES, BannerUpload, CreatePostState, Post, PostCreate, flatten_errors, to_iso_timestamp
)
from tests.conftest import FIXED_NOW, VALID_CONTENT


def errors_for(fields):
    with pytest.raises(ValidationError) as exc_info:
        PostCreate.model_validate(fields)
    return flatten_errors(exc_info.value)


class TestPostCreate:
    def test_valid_fields(self, valid_fields):
        form = PostCreate.model_validate(valid_fields())
        assert form.title == "An Analysis: Interstellar!"
        assert form.banner is None
        assert form.movie_snapshot() == {}

    def test_title_is_stripped_before_length_check(self, valid_fields):
        errors = errors_for(valid_fields(title="  ab   "))
        assert errors["title"] == ["Title must be at least 3 characters long."]

        form = PostCreate.model_validate(valid_fields(title="  Heat  "))
        assert form.title == "Heat"

    def test_missing_fields_report_both_errors(self):
        errors = errors_for({"title": None, "content": None})
        assert set(errors) == {"title", "content"}
        assert errors["content"] == ["Content must be at least 50 characters long."]

    def test_content_length_boundary(self, valid_fields):
        assert PostCreate.model_validate(valid_fields(content="x" * 50)).content == "x" * 50
        assert "content" in errors_for(valid_fields(content="x" * 49))

    def test_banner_at_ceiling_is_rejected(self, valid_fields):
        banner = BannerUpload(filename="big.png", content_type="image/png", data=b"\0" * MAX_BANNER_BYTES)
        errors = errors_for(valid_fields(banner=banner))
        assert errors["banner"] == ["Max image size is 4MB."]

    def test_banner_below_ceiling_is_kept(self, valid_fields):
        banner = BannerUpload(filename="ok.png", content_type="image/png", data=b"\0" * (MAX_BANNER_BYTES - 1))
        assert PostCreate.model_validate(valid_fields(banner=banner)).banner.size == MAX_BANNER_BYTES - 1

    def test_empty_banner_counts_as_absent(self, valid_fields):
        banner = BannerUpload(filename="empty.png", data=b"")
        assert PostCreate.model_validate(valid_fields(banner=banner)).banner is None

    def test_movie_snapshot_keeps_supplied_fields(self, valid_fields):
        form = PostCreate.model_validate(valid_fields(
            movieApiId="157336",
            movieTitle="Interstellar",
            moviePosterUrl="https://image.tmdb.org/t/p/w500/x.jpg",
            movieReleaseDate="  ",
        ))
        assert form.movie_snapshot() == {
            "movieApiId": 157336,
            "movieTitle": "Interstellar",
            "moviePosterUrl": "https://image.tmdb.org/t/p/w500/x.jpg",
        }

    def test_non_numeric_movie_id(self, valid_fields):
        errors = errors_for(valid_fields(movieApiId="abc"))
        assert errors["movieApiId"] == ["Movie id must be a number."]


def test_create_post_state_first_error():
    state = CreatePostState(errors={"title": ["first", "second"]})
    assert state.first_error("title") == "first"
    assert state.first_error("content") is None


def test_iso_timestamp_format():
    assert to_iso_timestamp(FIXED_NOW) == "2025-09-10T12:00:00.000Z"


class TestPost:
    def make_post(self, **data):
        body = {
            "title": "Heat",
            "slug": "heat",
            "content": VALID_CONTENT,
            "createdAt": "2025-09-10T12:00:00.000Z",
        }
        body.update(data)
        return Post.from_document(Document(id="abc123", data=body))

    def test_from_document_without_movie(self):
        post = self.make_post()
        assert post.id == "abc123"
        assert post.banner_url == ""
        assert not post.has_movie
        assert post.to_document() == {
            "title": "Heat",
            "slug": "heat",
            "content": VALID_CONTENT,
            "createdAt": "2025-09-10T12:00:00.000Z",
            "bannerUrl": "",
        }

    def test_has_movie(self):
        assert self.make_post(movieApiId=949, movieTitle="Heat").has_movie

    def test_published_on(self):
        assert self.make_post().published_on == "September 10, 2025"

    def test_published_on_keeps_unparseable_value(self):
        assert self.make_post(createdAt="yesterday").published_on == "yesterday"

    def test_excerpt_strips_markup_and_truncates(self):
        post = self.make_post(content="<p>" + "word " * 60 + "</p>")
        excerpt = post.excerpt()
        assert "<p>" not in excerpt
        assert excerpt.endswith("...")
        assert len(excerpt) == 153

    def test_short_excerpt_is_untouched(self):
        assert self.make_post(content="<b>Short</b> and sweet").excerpt() == "Short and sweet"
