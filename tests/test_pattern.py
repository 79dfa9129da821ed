"""Tests for larvatus.routing.pattern — template compilation and matching."""

import pytest

from larvatus.errors import ConfigurationError
from larvatus.routing.pattern import Segment, compile_template


class TestCompileTemplate:
    def test_static(self) -> None:
        pattern = compile_template("/users")
        assert pattern.segments == (Segment(""), Segment("users"))

    def test_param(self) -> None:
        pattern = compile_template("/users/:id")
        assert pattern.segments[2].is_param is True
        assert pattern.segments[2].param_name == "id"
        assert pattern.param_names == ("id",)

    def test_multiple_params_in_order(self) -> None:
        pattern = compile_template("/users/:user_id/posts/:post_id")
        assert pattern.param_names == ("user_id", "post_id")

    def test_root(self) -> None:
        pattern = compile_template("/")
        assert pattern.segments == (Segment(""), Segment(""))

    def test_colon_inside_segment_is_literal(self) -> None:
        pattern = compile_template("/time/12:30")
        assert pattern.segments[2] == Segment("12:30")
        assert pattern.param_names == ()

    def test_equal_templates_compile_equal(self) -> None:
        assert compile_template("/a/:b") == compile_template("/a/:b")
        assert hash(compile_template("/a/:b")) == hash(compile_template("/a/:b"))

    def test_param_name_is_part_of_identity(self) -> None:
        assert compile_template("/a/:b") != compile_template("/a/:c")

    def test_rejects_missing_leading_slash(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            compile_template("users")
        assert "must start with '/'" in str(exc_info.value)

    def test_rejects_empty_param_name(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_template("/users/:")

    def test_rejects_non_word_param_name(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_template("/users/:id.json")

    @pytest.mark.parametrize("template", ["/users/{id}", "/users/<id>", "/users/{id", "/users/id}"])
    def test_rejects_foreign_placeholder_syntax(self, template: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            compile_template(template)
        assert "':param'" in str(exc_info.value)


class TestMatch:
    def test_param_captured(self) -> None:
        assert compile_template("/users/:id").match("/users/42") == {"id": "42"}

    def test_extra_segment_fails(self) -> None:
        assert compile_template("/users/:id").match("/users/42/edit") is None

    def test_missing_segment_fails(self) -> None:
        assert compile_template("/users/:id").match("/users") is None

    def test_literal_is_byte_for_byte(self) -> None:
        pattern = compile_template("/Users")
        assert pattern.match("/Users") == {}
        assert pattern.match("/users") is None

    def test_capture_must_be_non_empty(self) -> None:
        assert compile_template("/users/:id").match("/users/") is None

    def test_trailing_slash_is_significant(self) -> None:
        assert compile_template("/users").match("/users/") is None
        assert compile_template("/users/").match("/users") is None
        assert compile_template("/users/").match("/users/") == {}

    def test_root(self) -> None:
        assert compile_template("/").match("/") == {}
        assert compile_template("/").match("/users") is None

    def test_params_in_pattern_order(self) -> None:
        params = compile_template("/users/:user_id/posts/:post_id").match("/users/1/posts/9")
        assert list(params or {}) == ["user_id", "post_id"]
        assert params == {"user_id": "1", "post_id": "9"}

    def test_duplicate_name_last_value_wins(self) -> None:
        params = compile_template("/pair/:x/:x").match("/pair/first/second")
        assert params == {"x": "second"}

    def test_capture_keeps_encoded_characters(self) -> None:
        assert compile_template("/files/:name").match("/files/a%20b.txt") == {"name": "a%20b.txt"}
