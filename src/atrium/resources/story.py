"""Stories: comments and activity records on tasks"""
import typing as t
from dataclasses import dataclass

from ..attributes import Field, parse_datetime
from ..collection import Collection
from ..params import Arguments, fill_path, required
from ..resource import Resource

__all__ = ["Story"]


@dataclass(frozen=True)
class FindByTask(Arguments):
    task: str = required()
    limit: t.Optional[int] = None


class Story(Resource):
    """A comment, or a record of a change, on a task"""

    plural_name = "stories"

    resource_subtype = Field()
    created_at = Field(load=parse_datetime)
    created_by = Field()
    text = Field()
    html_text = Field()
    is_pinned = Field()
    is_edited = Field()
    liked = Field()
    likes = Field()
    num_likes = Field()
    source = Field()
    type = Field()
    target = Field()

    @classmethod
    def find_by_task(cls, client, task=None, per_page=None, options=None):
        """The stories on a task"""
        args = FindByTask(task=task, limit=per_page or client.page_size)
        path, params = fill_path("/tasks/{task}/stories", args.build())
        return Collection.fetch(client, path, cls, params, options)
