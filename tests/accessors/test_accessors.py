from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import BaseModel

from keypager import (
    AttributeAccessor,
    DateTimeValueAccessor,
    FieldNotFound,
    MappingAccessor,
    ValueAccessor,
    ValueAccessorInterface,
    default_accessor,
)
from keypager.accessors import to_timestamp


@dataclass
class Author:
    name: str


@dataclass
class Post:
    id: int
    author: Author
    published: datetime


class Comment(BaseModel):
    id: str
    meta: dict


class TestValueAccessor:
    def test_reads_attributes_and_keys_along_a_path(self):
        accessor = ValueAccessor()
        post = Post(1, Author("ada"), datetime(2020, 1, 1))
        assert accessor.get_value(post, "author.name") == "ada"
        assert accessor.get_value({"post": post}, "post.author.name") == "ada"

    def test_reads_pydantic_models(self):
        comment = Comment(id="c1", meta={"score": 3})
        assert ValueAccessor().get_value(comment, "meta.score") == 3

    def test_missing_segment(self):
        with pytest.raises(FieldNotFound, match="'missing'"):
            ValueAccessor().get_value({"a": {}}, "a.missing")

    def test_none_values_are_returned(self):
        assert ValueAccessor().get_value({"a": None}, "a") is None

    def test_empty_path(self):
        with pytest.raises(FieldNotFound):
            ValueAccessor().get_value({}, "")

    def test_satisfies_protocol(self):
        assert isinstance(ValueAccessor(), ValueAccessorInterface)
        assert isinstance(default_accessor(), ValueAccessorInterface)


class TestSingleShapeAccessors:
    def test_attribute_accessor(self):
        post = Post(1, Author("ada"), datetime(2020, 1, 1))
        assert AttributeAccessor().get_value(post, "author.name") == "ada"
        with pytest.raises(FieldNotFound):
            AttributeAccessor().get_value({"author": {}}, "author")

    def test_mapping_accessor(self):
        assert MappingAccessor().get_value({"a": {"b": 2}}, "a.b") == 2
        with pytest.raises(FieldNotFound):
            MappingAccessor().get_value({"a": 1}, "a.b")


class TestDateTimeValueAccessor:
    def test_naive_datetimes_are_utc(self):
        accessor = DateTimeValueAccessor(ValueAccessor())
        assert accessor.get_value({"t": datetime(1991, 11, 24, 2)}, "t") == 690948000

    def test_aware_datetimes_keep_their_offset(self):
        accessor = DateTimeValueAccessor(ValueAccessor())
        value = datetime(1991, 11, 24, 4, tzinfo=timezone(timedelta(hours=2)))
        assert accessor.get_value({"t": value}, "t") == 690948000

    def test_dates_are_midnight_utc(self):
        assert to_timestamp(date(1991, 11, 24)) == 690940800

    def test_fractional_seconds_are_truncated(self):
        assert to_timestamp(datetime(1991, 11, 24, 0, 0, 0, 999000)) == 690940800

    def test_pre_epoch_fractions_round_down(self):
        assert to_timestamp(datetime(1969, 12, 31, 23, 59, 59, 500000)) == -1

    def test_other_values_pass_through(self):
        accessor = DateTimeValueAccessor(ValueAccessor())
        assert accessor.get_value({"t": "2020-01-01"}, "t") == "2020-01-01"
        assert accessor.get_value({"t": 5}, "t") == 5
