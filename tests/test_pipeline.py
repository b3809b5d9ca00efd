"""Tests for the orchestration pipeline and settings."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from recipebook.config import Settings
from recipebook.core.models import GenerationOptions, IssueKind, PageSize
from recipebook.pipeline import Pipeline, load_book


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(output_dir=tmp_path / "out")


def _write_book(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestSettings:
    def test_defaults(self):
        s = Settings.from_env({})
        assert s.prefetch_concurrency == 4
        assert s.image_timeout == 20.0
        assert s.output_dir == Path("./output")
        assert s.page_size == PageSize.A4

    def test_from_env(self):
        s = Settings.from_env({
            "RECIPEBOOK_PREFETCH_CONCURRENCY": "8",
            "RECIPEBOOK_IMAGE_TIMEOUT": "2.5",
            "RECIPEBOOK_OUTPUT_DIR": "/tmp/books",
            "RECIPEBOOK_PAGE_SIZE": "letter",
        })
        assert s.prefetch_concurrency == 8
        assert s.image_timeout == 2.5
        assert s.output_dir == Path("/tmp/books")
        assert s.page_size == PageSize.LETTER

    def test_bad_values_fall_back(self):
        s = Settings.from_env({
            "RECIPEBOOK_PREFETCH_CONCURRENCY": "many",
            "RECIPEBOOK_PAGE_SIZE": "A5",
        })
        assert s.prefetch_concurrency == 4
        assert s.page_size == PageSize.A4


class TestLoadBook:
    def test_load_sample(self, sample_book_path):
        book = load_book(sample_book_path)
        assert len(book.recipes) == 2


class TestPipeline:
    def test_writes_pdf(self, sample_book_path, settings):
        result = Pipeline(settings=settings).run(sample_book_path)
        assert result.success
        assert result.output_path == settings.output_dir.resolve() / (
            "weeknight-favourites-recipe-book.pdf"
        )
        assert result.output_path.read_bytes().startswith(b"%PDF")
        assert result.result.page_count == 4

    def test_output_dir_override(self, sample_book_path, settings, tmp_path):
        target = tmp_path / "elsewhere"
        result = Pipeline(settings=settings).run(sample_book_path, output_dir=target)
        assert result.output_path.parent == target.resolve()

    def test_template_override(self, sample_book_path, settings):
        result = Pipeline(settings=settings).run(sample_book_path, template_id="nonexistent")
        assert result.success
        assert [i.kind for i in result.issues] == [IssueKind.UNKNOWN_TEMPLATE]

    def test_missing_file_fails(self, tmp_path, settings):
        result = Pipeline(settings=settings).run(tmp_path / "missing.json")
        assert not result.success
        assert "could not load book" in result.error
        assert result.output_path is None

    def test_invalid_book_fails(self, tmp_path, settings):
        path = _write_book(tmp_path / "bad.json", {
            "name": "Bad",
            "sections": [{"name": "S", "recipeIds": ["ghost"]}],
            "recipes": [],
        })
        result = Pipeline(settings=settings).run(path)
        assert not result.success
        assert result.error

    def test_photo_failure_degrades(self, tmp_path, settings, png_bytes):
        path = _write_book(tmp_path / "book.json", {
            "name": "Photo Book",
            "recipes": [
                {"id": "a", "title": "A", "photoUrl": "https://img.test/a.png",
                 "ingredients": [{"name": "salt"}]},
                {"id": "b", "title": "B", "photoUrl": "https://img.test/b.png",
                 "ingredients": [{"name": "pepper"}]},
            ],
        })
        good = png_bytes()

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/a.png":
                return httpx.Response(200, content=good)
            return httpx.Response(500)

        result = Pipeline(settings=settings, transport=httpx.MockTransport(handler)).run(path)
        assert result.success
        failures = [i for i in result.issues if i.kind == IssueKind.IMAGE_ACQUISITION]
        assert [i.recipe_id for i in failures] == ["b"]

    def test_no_photos_skips_prefetch(self, tmp_path, settings):
        path = _write_book(tmp_path / "book.json", {
            "name": "Photo Book",
            "recipes": [{"id": "a", "title": "A", "photoUrl": "https://img.test/a.png"}],
        })
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        result = Pipeline(settings=settings, transport=httpx.MockTransport(handler)).run(
            path, options=GenerationOptions(include_photos=False),
        )
        assert result.success
        assert calls == []
        assert result.issues == []
