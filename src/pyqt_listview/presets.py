"""
Record types, sample data generators and ready-made view configurations.

The two presets mirror the dashboard's list views: a post list that shows
everything until a search narrows it, and a product-style item list that
shows nothing until the user searches.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple

from pyqt_listview.core.field_utils import FieldRef, resolve_field
from pyqt_listview.core.performance_monitor import timed
from pyqt_listview.core.sort_utils import number_comparator, text_comparator, timestamp_comparator
from pyqt_listview.services.view_config import EmptySearchPolicy, FilterDef, SortKeyDef, ViewConfig

CATEGORY_COUNT = 10
TAG_COUNT = 5

_WORDS = (
    "react", "python", "cache", "debounce", "window", "filter", "sort", "memo",
    "render", "query", "index", "signal", "layout", "theme", "widget", "table",
)


@dataclass(frozen=True)
class Author:
    id: int
    username: str


@dataclass(frozen=True)
class Post:
    id: int
    title: str
    content: str
    created_at: datetime
    like_count: int = 0
    author: Optional[Author] = None


@dataclass(frozen=True)
class DemoItem:
    id: int
    name: str
    description: str
    price: int
    category: str
    tags: Tuple[str, ...] = field(default_factory=tuple)
    in_stock: bool = True
    rating: int = 1


def generate_demo_items(count: int, seed: Optional[int] = None) -> Tuple[DemoItem, ...]:
    """Generate count demo items; pass seed for reproducible prices and stock."""
    rng = random.Random(seed)
    return tuple(
        DemoItem(
            id=i,
            name=f"Item {i}",
            description=f"This is a description for item {i}. "
                        f"It contains some text that makes each item unique.",
            price=rng.randint(10, 1009),
            category=f"Category {i % CATEGORY_COUNT}",
            tags=tuple(f"tag{(i + offset) % TAG_COUNT}" for offset in range(3)),
            in_stock=rng.random() > 0.3,
            rating=rng.randint(1, 5),
        )
        for i in range(count)
    )


def generate_authors(count: int) -> Tuple[Author, ...]:
    return tuple(Author(id=i, username=f"user{i}") for i in range(count))


def generate_posts(count: int, authors: Optional[Sequence[Author]] = None,
                   seed: Optional[int] = None,
                   start: Optional[datetime] = None) -> Tuple[Post, ...]:
    """Generate count posts spread backwards in time from start."""
    rng = random.Random(seed)
    authors = tuple(authors) if authors is not None else generate_authors(10)
    start = start or datetime(2024, 1, 1, 12, 0, 0)
    posts = []
    for i in range(count):
        topic = rng.choice(_WORDS)
        posts.append(Post(
            id=i,
            title=f"Post {i} about {topic}",
            content=f"Notes on {topic} and {rng.choice(_WORDS)}.",
            created_at=start - timedelta(minutes=rng.randint(0, 60 * 24 * 365)),
            like_count=rng.randint(0, 500),
            author=authors[i % len(authors)] if authors else None,
        ))
    return tuple(posts)


@timed("Derive filter choices")
def distinct_values(collection: Sequence[Any], field_ref: FieldRef) -> List[Any]:
    """Distinct field values in first-seen order. Unhashable values compare by equality."""
    seen = set()
    values = []
    for record in collection:
        value = resolve_field(record, field_ref)
        try:
            if value in seen:
                continue
            seen.add(value)
        except TypeError:
            if value in values:
                continue
        values.append(value)
    return values


def post_list_config(initial_window_size: int = 50) -> ViewConfig:
    """Posts: search title, content and author; newest or most liked first; show all."""
    return ViewConfig(
        search_fields=("title", "content", "author.username"),
        sort_keys=(
            SortKeyDef("date", timestamp_comparator("created_at"), label="Sort by Date"),
            SortKeyDef("likes", number_comparator("like_count", descending=True), label="Sort by Likes"),
        ),
        initial_window_size=initial_window_size,
        empty_search_policy=EmptySearchPolicy.SHOW_ALL,
    )


def demo_item_config(items: Sequence[DemoItem], initial_window_size: int = 50) -> ViewConfig:
    """Demo items: category and stock filters; name, price or rating order; show none."""
    return ViewConfig(
        search_fields=("name", "description"),
        discrete_filters=(
            FilterDef.equals("category", "category", default="all",
                             choices=["all", *distinct_values(items, "category")], label="Category"),
            FilterDef.flag("in_stock", "in_stock", label="In stock only"),
        ),
        sort_keys=(
            SortKeyDef("name", text_comparator("name"), label="Name"),
            SortKeyDef("price", number_comparator("price"), label="Price"),
            SortKeyDef("rating", number_comparator("rating", descending=True), label="Rating"),
        ),
        initial_window_size=initial_window_size,
        empty_search_policy=EmptySearchPolicy.SHOW_NONE,
    )
