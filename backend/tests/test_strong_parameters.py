"""
Strong parameters against the Article and Comment models
"""
from unittest.mock import patch

import pytest
from blogdemo.core.errors import (ForbiddenAttributesError, ParameterMissing,
                                  UnknownAttributeError)
from blogdemo.core.parameters import Parameters
from blogdemo.models import Article, Comment

ARTICLE_HASH = {"title": "Test", "body": "test body"}


class TestPermitWithoutRequire:
    """Using permit without require"""

    def test_unhandled_params_raise(self):
        params = Parameters(ARTICLE_HASH)

        with pytest.raises(ForbiddenAttributesError):
            Article(params)

    def test_non_permitted_attributes_are_reported(self):
        params = Parameters(ARTICLE_HASH)

        with patch("blogdemo.core.parameters.instrument_unpermitted_parameters") as instrument:
            assert params.permit("title") == {"title": "Test"}

        instrument.assert_called_once_with(["body"])

    def test_nothing_reported_when_all_keys_permitted(self):
        params = Parameters(ARTICLE_HASH)

        with patch("blogdemo.core.parameters.instrument_unpermitted_parameters") as instrument:
            params.permit("title", "body")

        instrument.assert_not_called()

    def test_permitted_key_that_is_not_a_model_attribute(self):
        params = Parameters({**ARTICLE_HASH, "this_is_not_an_attribute_of_article": "test"})
        permitted = params.permit("title", "this_is_not_an_attribute_of_article")

        with pytest.raises(UnknownAttributeError) as exc_info:
            Article(permitted)

        assert exc_info.value.attribute == "this_is_not_an_attribute_of_article"
        assert str(exc_info.value) == "unknown attribute: this_is_not_an_attribute_of_article"

    def test_new_with_permitted_attributes(self):
        article = Article(Parameters(ARTICLE_HASH).permit("title", "body"))

        assert article.title == "Test"
        assert article.body == "test body"

    def test_update_with_permitted_attributes(self, db, first_article):
        first_article.update_attributes(Parameters(ARTICLE_HASH).permit("title", "body"))
        db.commit()
        db.expire_all()

        article = db.get(Article, first_article.id)
        assert article.title == "Test"
        assert article.body == "test body"


class TestRequire:
    """Using the require method"""

    @pytest.fixture
    def params(self):
        return Parameters({
            "article_attributes": {"title": "Test", "body": "test body"},
            "other_attributes": {"amount": "12", "color": "blue"},
        })

    def test_require_something_not_present(self, params):
        with pytest.raises(ParameterMissing) as exc_info:
            params.require("category_attributes")

        assert str(exc_info.value) == "param is missing or the value is empty: category_attributes"

    def test_require_filters_out_everything_but_the_key(self, params):
        assert params.require("article_attributes") == {"title": "Test", "body": "test body"}

    def test_required_value_without_permit_raises(self, params):
        with pytest.raises(ForbiddenAttributesError):
            Article(params.require("article_attributes"))

    def test_update_with_unpermitted_tree_raises_and_keeps_record(self, params, first_article):
        with pytest.raises(ForbiddenAttributesError):
            first_article.update_attributes(params.require("article_attributes"))

        assert first_article.title == "Welcome"

    def test_new_with_require_and_permit(self, params):
        article = Article(params.require("article_attributes").permit("title", "body"))

        assert article.title == "Test"
        assert article.body == "test body"

    def test_update_with_require_and_permit(self, params, first_article):
        first_article.update_attributes(params.require("article_attributes").permit("title", "body"))

        assert first_article.title == "Test"
        assert first_article.body == "test body"


class TestNestedAttributesOnComment:
    """Nested attributes on comment, which belongs to article"""

    @pytest.fixture
    def params(self):
        return Parameters({
            "comment": {
                "author": "John Smith",
                "content": "Great writing!",
                "article_attributes": {"title": "Test", "body": "test body"},
            }
        })

    def test_wrong_way_to_permit_nested_params(self, params):
        attributes = params.require("comment").permit("author", "article_attributes")

        assert attributes == {"author": "John Smith"}
        assert "author" in attributes
        assert "article_attributes" not in attributes

    def test_correct_way_to_permit_nested_params(self, params, db):
        attributes = params.require("comment").permit("author", article_attributes=["id", "title", "body"])

        assert attributes == {
            "author": "John Smith",
            "article_attributes": {"title": "Test", "body": "test body"},
        }

        comment = Comment(attributes)
        assert comment.author == "John Smith"
        assert comment.content is None
        assert comment.article.title == "Test"
        assert comment.article.body == "test body"

        db.add(comment)
        db.commit()
        assert comment.article_id == comment.article.id


class TestUpdateExistingCommentAndArticle:
    """Update existing comment and its existing article"""

    def test_correct_way_to_permit_nested_params(self, db, records):
        vacation, thanks = records["vacation"], records["thanks"]
        params = Parameters({
            "comment": {
                "author": "John Smith",
                "content": "Great writing!",
                "article_attributes": {"id": vacation.id, "title": "Test", "body": "test body"},
            }
        })

        attributes = params.require("comment").permit("author", article_attributes=["id", "title", "body"])

        assert attributes == {
            "author": "John Smith",
            "article_attributes": {"id": vacation.id, "title": "Test", "body": "test body"},
        }

        thanks.update_attributes(attributes)
        db.commit()

        assert thanks.author == "John Smith"
        assert thanks.content == "Thanks for sharing!"
        assert thanks.article is vacation
        assert thanks.article.title == "Test"
        assert thanks.article.body == "test body"
        assert db.query(Article).count() == 2


class TestNestedAttributesOnArticle:
    """Nested attributes on articles, which have many comments"""

    @pytest.fixture
    def raw(self):
        return {
            "article": {
                "title": "Test",
                "body": "test body",
                "comments_attributes": {
                    "0": {"author": "John", "content": "great"},
                    "1": {"author": "Mary", "content": "awful"},
                },
            }
        }

    def test_wrong_way_to_permit_nested_params(self, raw):
        attributes = Parameters(raw).require("article").permit("title", "comments_attributes")

        assert attributes == {"title": "Test"}
        assert "comments_attributes" not in attributes.permit("title", "comments_attributes")

    def test_correct_way_to_permit_nested_params(self, raw):
        attributes = Parameters(raw).require("article").permit("title", comments_attributes=["author", "content"])

        assert attributes["comments_attributes"] == raw["article"]["comments_attributes"]

    def test_new_article_with_nested_comments(self, raw, db):
        attributes = Parameters(raw).require("article").permit(
            "title", "body", comments_attributes=["author", "content"]
        )

        article = Article(attributes)
        db.add(article)
        db.commit()

        assert sorted(c.author for c in article.comments) == ["John", "Mary"]
        assert all(c.article_id == article.id for c in article.comments)


class TestUpdateArticleWithComments:
    """Update existing article, update existing comment and create a new one"""

    def test_permit_keeps_indexed_comments(self, records):
        raw = {
            "article": {
                "title": "Test",
                "body": "test body",
                "comments_attributes": {
                    "0": {"author": "John", "content": "great"},
                    "1": {"author": "Mary", "content": "awful"},
                },
            }
        }

        attributes = Parameters(raw).require("article").permit("title", comments_attributes=["author", "content"])

        assert attributes["comments_attributes"] == raw["article"]["comments_attributes"]

    def test_update_existing_and_create_new_comment(self, db, records):
        vacation, thanks = records["vacation"], records["thanks"]
        params = Parameters({
            "article": {
                "title": "Test",
                "body": "test body",
                "comments_attributes": {
                    "0": {"id": str(thanks.id), "author": "John", "content": "great"},
                    "1": {"author": "Mary", "content": "awful"},
                },
            }
        })

        attributes = params.require("article").permit(
            "title", "body", comments_attributes=["id", "author", "content"]
        )
        vacation.update_attributes(attributes)
        db.commit()

        assert vacation.title == "Test"
        assert thanks.author == "John"
        assert thanks.content == "great"
        assert [c.author for c in vacation.comments] == ["John", "Mary"]
        assert db.query(Comment).count() == 2
