"""Tags: labels attached to tasks across projects"""
import typing as t
from dataclasses import dataclass

from ..attributes import Field, parse_datetime
from ..collection import Collection
from ..params import Arguments, fill_path, required
from ..resource import Resource

__all__ = ["Tag"]


@dataclass(frozen=True)
class FindByWorkspace(Arguments):
    workspace: str = required()
    limit: t.Optional[int] = None


class Tag(Resource):
    """A label for tasks, which may span projects in a workspace"""

    plural_name = "tags"

    name = Field()
    color = Field()
    notes = Field()
    created_at = Field(load=parse_datetime)
    followers = Field()
    workspace = Field()

    @classmethod
    def find_by_workspace(
        cls, client, workspace=None, per_page=None, options=None
    ):
        """The tags in a workspace"""
        args = FindByWorkspace(
            workspace=workspace, limit=per_page or client.page_size
        )
        path, params = fill_path("/workspaces/{workspace}/tags", args.build())
        return Collection.fetch(client, path, cls, params, options)

    def tasks(self, per_page=None, options=None):
        """The tasks with this tag"""
        from .task import Task

        self._ensure_live()
        return Task.find_by_tag(
            self.client, tag=self.gid, per_page=per_page, options=options
        )
