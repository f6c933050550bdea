"""Projects: prioritized lists of tasks"""
import typing as t
from dataclasses import dataclass

from ..attributes import Field, parse_date, parse_datetime
from ..collection import Collection
from ..params import Arguments, fill_path, required
from ..resource import Resource

__all__ = ["Project"]


@dataclass(frozen=True)
class FindByWorkspace(Arguments):
    workspace: str = required()
    archived: t.Optional[bool] = None
    limit: t.Optional[int] = None


class Project(Resource):
    """A prioritized list of tasks, or a board"""

    plural_name = "projects"

    name = Field()
    notes = Field()
    html_notes = Field()
    archived = Field()
    color = Field()
    created_at = Field(load=parse_datetime)
    modified_at = Field(load=parse_datetime)
    current_status = Field()
    due_on = Field(load=parse_date)
    start_on = Field(load=parse_date)
    public = Field()
    owner = Field()
    team = Field()
    members = Field()
    followers = Field()
    custom_fields = Field()
    layout = Field()
    workspace = Field()

    @classmethod
    def find_by_workspace(
        cls, client, workspace=None, archived=None, per_page=None, options=None
    ):
        """The projects in a workspace

        Parameters
        ----------
        archived: bool or None
            only return projects whose ``archived`` field matches
        """
        args = FindByWorkspace(
            workspace=workspace,
            archived=archived,
            limit=per_page or client.page_size,
        )
        path, params = fill_path(
            "/workspaces/{workspace}/projects", args.build()
        )
        return Collection.fetch(client, path, cls, params, options)

    def tasks(self, per_page=None, options=None):
        """The tasks in this project, in their priority order"""
        from .task import Task

        self._ensure_live()
        return Task.find_by_project(
            self.client, project=self.gid, per_page=per_page, options=options
        )
