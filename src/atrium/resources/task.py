"""Tasks: the basic object around which most operations are centered"""
import typing as t
from dataclasses import dataclass

from ..attributes import Field, parse_date, parse_datetime
from ..collection import Collection
from ..params import Arguments, fill_path, free_form, merge_params, required
from ..resource import ACKNOWLEDGE, REFRESH, Action, Resource, related

__all__ = ["Task"]

_Gids = t.Sequence[str]
_Extra = t.Mapping[str, t.Any]


@dataclass(frozen=True)
class CreateTask(Arguments):
    __one_of__ = ("workspace", "projects", "parent")

    workspace: t.Optional[str] = None
    projects: t.Optional[_Gids] = None
    parent: t.Optional[str] = None
    extra: _Extra = free_form()


@dataclass(frozen=True)
class CreateTaskInWorkspace(Arguments):
    workspace: str = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class FindByProject(Arguments):
    project: str = required()
    limit: t.Optional[int] = None


@dataclass(frozen=True)
class FindByTag(Arguments):
    tag: str = required()
    limit: t.Optional[int] = None


@dataclass(frozen=True)
class FindBySection(Arguments):
    section: str = required()
    limit: t.Optional[int] = None


@dataclass(frozen=True)
class FindByUserTaskList(Arguments):
    user_task_list: str = required()
    completed_since: t.Optional[str] = None
    limit: t.Optional[int] = None


@dataclass(frozen=True)
class FindAll(Arguments):
    assignee: t.Optional[str] = None
    workspace: t.Optional[str] = None
    project: t.Optional[str] = None
    section: t.Optional[str] = None
    tag: t.Optional[str] = None
    user_task_list: t.Optional[str] = None
    completed_since: t.Optional[str] = None
    modified_since: t.Optional[str] = None
    limit: t.Optional[int] = None


@dataclass(frozen=True)
class SearchInWorkspace(Arguments):
    workspace: str = required()
    resource_subtype: t.Optional[str] = None
    limit: t.Optional[int] = None


@dataclass(frozen=True)
class DuplicateTask(Arguments):
    name: str = required()
    include: t.Optional[t.Sequence[str]] = None
    extra: _Extra = free_form()


@dataclass(frozen=True)
class Dependencies(Arguments):
    dependencies: _Gids = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class Dependents(Arguments):
    dependents: _Gids = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class Followers(Arguments):
    followers: _Gids = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class AddProject(Arguments):
    project: str = required()
    insert_after: t.Optional[str] = None
    insert_before: t.Optional[str] = None
    section: t.Optional[str] = None
    extra: _Extra = free_form()


@dataclass(frozen=True)
class RemoveProject(Arguments):
    project: str = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class TagArgument(Arguments):
    tag: str = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class AddSubtask(Arguments):
    extra: _Extra = free_form()


@dataclass(frozen=True)
class SetParent(Arguments):
    parent: str = required()
    insert_after: t.Optional[str] = None
    insert_before: t.Optional[str] = None
    extra: _Extra = free_form()


@dataclass(frozen=True)
class AddComment(Arguments):
    text: str = required()
    extra: _Extra = free_form()


@dataclass(frozen=True)
class InsertInUserTaskList(Arguments):
    user_task_list: str = required()
    task: t.Optional[str] = None
    insert_before: t.Optional[str] = None
    insert_after: t.Optional[str] = None
    extra: _Extra = free_form()


class Task(Resource):
    """A task: the basic object around which many operations are centered.

    The related-record fields ``dependencies``, ``dependents``,
    ``projects`` and ``tags`` are available as ``dependency_refs``,
    ``dependent_refs``, ``project_refs`` and ``tag_refs``,
    since the plain names query the related records.
    """

    plural_name = "tasks"

    resource_subtype = Field()
    assignee = Field()
    assignee_status = Field()
    created_at = Field(load=parse_datetime)
    completed = Field()
    completed_at = Field(load=parse_datetime)
    custom_fields = Field()
    dependency_refs = Field("dependencies")
    dependent_refs = Field("dependents")
    due_on = Field(load=parse_date)
    due_at = Field(load=parse_datetime)
    external = Field()
    followers = Field()
    is_rendered_as_separator = Field()
    liked = Field()
    likes = Field()
    memberships = Field()
    modified_at = Field(load=parse_datetime)
    name = Field()
    notes = Field()
    html_notes = Field()
    num_likes = Field()
    num_subtasks = Field()
    parent = Field()
    project_refs = Field("projects")
    start_on = Field(load=parse_date)
    workspace = Field()
    tag_refs = Field("tags")

    actions = {
        "duplicate_task": Action(
            "/tasks/{gid}/duplicate", DuplicateTask, related("Job")
        ),
        "add_dependencies": Action(
            "/tasks/{gid}/addDependencies",
            Dependencies,
            related("Task", many=True),
        ),
        "add_dependents": Action(
            "/tasks/{gid}/addDependents",
            Dependents,
            related("Task", many=True),
        ),
        "remove_dependencies": Action(
            "/tasks/{gid}/removeDependencies",
            Dependencies,
            related("Task", many=True),
        ),
        "remove_dependents": Action(
            "/tasks/{gid}/removeDependents",
            Dependents,
            related("Task", many=True),
        ),
        "add_followers": Action(
            "/tasks/{gid}/addFollowers", Followers, REFRESH
        ),
        "remove_followers": Action(
            "/tasks/{gid}/removeFollowers", Followers, REFRESH
        ),
        "add_project": Action(
            "/tasks/{gid}/addProject", AddProject, ACKNOWLEDGE
        ),
        "remove_project": Action(
            "/tasks/{gid}/removeProject", RemoveProject, ACKNOWLEDGE
        ),
        "add_tag": Action("/tasks/{gid}/addTag", TagArgument, ACKNOWLEDGE),
        "remove_tag": Action(
            "/tasks/{gid}/removeTag", TagArgument, ACKNOWLEDGE
        ),
        "add_subtask": Action(
            "/tasks/{gid}/subtasks", AddSubtask, related("Task")
        ),
        "set_parent": Action(
            "/tasks/{gid}/setParent", SetParent, ACKNOWLEDGE
        ),
        "add_comment": Action(
            "/tasks/{gid}/stories", AddComment, related("Story")
        ),
        "insert_in_user_task_list": Action(
            "/user_task_lists/{user_task_list}/tasks/insert",
            InsertInUserTaskList,
            ACKNOWLEDGE,
        ),
    }

    @classmethod
    def create(cls, client, workspace=None, options=None, **data):
        """Create a new task.

        Every task is created in a workspace, which cannot be changed
        afterwards. The workspace need not be given if
        ``projects`` or a ``parent`` task is.

        Parameters
        ----------
        client: ~atrium.Client
            the client to use
        workspace: str or None
            the workspace to create the task in
        options: ~typing.Mapping or None
            the request options
        **data
            the attributes of the task
        """
        args = CreateTask(
            workspace=workspace,
            projects=data.pop("projects", None),
            parent=data.pop("parent", None),
            extra=data,
        )
        body = args.build()
        return cls._hydrate(client, client.post("/tasks", body, options))

    @classmethod
    def create_in_workspace(
        cls, client, workspace=None, options=None, **data
    ):
        """Create a new task in the given workspace"""
        args = CreateTaskInWorkspace(workspace=workspace, extra=data)
        path, body = fill_path("/workspaces/{workspace}/tasks", args.build())
        return cls._hydrate(client, client.post(path, body, options))

    @classmethod
    def _find_many(cls, client, template, args, options):
        path, params = fill_path(template, args.build())
        return Collection.fetch(client, path, cls, params, options)

    @classmethod
    def find_by_project(
        cls, client, project=None, project_id=None, per_page=None, options=None
    ):
        """The tasks in a project, in their priority order.

        ``project_id`` is accepted as a legacy alias of ``project``.
        """
        args = FindByProject(
            project=project if project is not None else project_id,
            limit=per_page or client.page_size,
        )
        return cls._find_many(
            client, "/projects/{project}/tasks", args, options
        )

    @classmethod
    def find_by_tag(cls, client, tag=None, per_page=None, options=None):
        """The tasks with the given tag"""
        args = FindByTag(tag=tag, limit=per_page or client.page_size)
        return cls._find_many(client, "/tags/{tag}/tasks", args, options)

    @classmethod
    def find_by_section(
        cls, client, section=None, per_page=None, options=None
    ):
        """The tasks in a section (board view only)"""
        args = FindBySection(
            section=section, limit=per_page or client.page_size
        )
        return cls._find_many(
            client, "/sections/{section}/tasks", args, options
        )

    @classmethod
    def find_by_user_task_list(
        cls,
        client,
        user_task_list=None,
        completed_since=None,
        per_page=None,
        options=None,
    ):
        """The tasks in a user's My Tasks list.

        Parameters
        ----------
        user_task_list: str
            the user task list
        completed_since: str or None
            only return tasks which are incomplete,
            or were completed since this time (or ``"now"``)
        """
        args = FindByUserTaskList(
            user_task_list=user_task_list,
            completed_since=completed_since,
            limit=per_page or client.page_size,
        )
        return cls._find_many(
            client, "/user_task_lists/{user_task_list}/tasks", args, options
        )

    @classmethod
    def find_all(
        cls,
        client,
        assignee=None,
        workspace=None,
        project=None,
        section=None,
        tag=None,
        user_task_list=None,
        completed_since=None,
        modified_since=None,
        per_page=None,
        options=None,
    ):
        """A filtered set of tasks.

        The server requires a ``project``, ``section``, ``tag``,
        or ``user_task_list``, or else both ``assignee`` and ``workspace``.
        """
        args = FindAll(
            assignee=assignee,
            workspace=workspace,
            project=project,
            section=section,
            tag=tag,
            user_task_list=user_task_list,
            completed_since=completed_since,
            modified_since=modified_since,
            limit=per_page or client.page_size,
        )
        return cls._find_many(client, "/tasks", args, options)

    @classmethod
    def search_in_workspace(
        cls,
        client,
        workspace=None,
        resource_subtype=None,
        per_page=None,
        options=None,
    ):
        """Search the tasks in a workspace.

        Search filters other than ``resource_subtype``
        go in ``options["params"]``. On key collisions,
        the named arguments take precedence.

        Returns
        -------
        ~atrium.Collection[Task]
        """
        args = SearchInWorkspace(
            workspace=workspace,
            resource_subtype=resource_subtype,
            limit=per_page or client.page_size,
        )
        path, named = fill_path(
            "/workspaces/{workspace}/tasks/search", args.build()
        )
        options = dict(options or {})
        params = merge_params(named, options.pop("params", None))
        return Collection.fetch(client, path, cls, params, options)

    search = search_in_workspace

    def duplicate_task(self, name=None, include=None, options=None, **data):
        """Start a job duplicating this task

        Parameters
        ----------
        name: str
            the name of the new task
        include: ~typing.Sequence[str] or None
            the fields to duplicate

        Returns
        -------
        ~atrium.resources.Job
        """
        return self.perform(
            "duplicate_task", options, name=name, include=include, extra=data
        )

    def dependencies(self, options=None):
        """The tasks this task depends on"""
        return self._related_collection("dependencies", Task, options=options)

    def dependents(self, options=None):
        """The tasks depending on this task"""
        return self._related_collection("dependents", Task, options=options)

    def add_dependencies(self, dependencies=None, options=None, **data):
        """Mark tasks as dependencies of this one.
        A task can have at most 15 dependencies."""
        return self.perform(
            "add_dependencies", options, dependencies=dependencies, extra=data
        )

    def add_dependents(self, dependents=None, options=None, **data):
        """Mark tasks as dependents of this one.
        A task can have at most 30 dependents."""
        return self.perform(
            "add_dependents", options, dependents=dependents, extra=data
        )

    def remove_dependencies(self, dependencies=None, options=None, **data):
        return self.perform(
            "remove_dependencies",
            options,
            dependencies=dependencies,
            extra=data,
        )

    def remove_dependents(self, dependents=None, options=None, **data):
        return self.perform(
            "remove_dependents", options, dependents=dependents, extra=data
        )

    def add_followers(self, followers=None, options=None, **data):
        """Add followers, and refresh with the updated record"""
        return self.perform(
            "add_followers", options, followers=followers, extra=data
        )

    def remove_followers(self, followers=None, options=None, **data):
        """Remove followers, and refresh with the updated record"""
        return self.perform(
            "remove_followers", options, followers=followers, extra=data
        )

    def projects(self, per_page=None, options=None):
        """The projects this task is in"""
        from .project import Project

        return self._related_collection(
            "projects",
            Project,
            {"limit": per_page or self.client.page_size},
            options,
        )

    def add_project(
        self,
        project=None,
        insert_after=None,
        insert_before=None,
        section=None,
        options=None,
        **data
    ):
        """Add the task to a project, or move it within one.

        At most one of ``insert_after``, ``insert_before``
        and ``section`` should be given. Without them,
        the task goes to the end of the project.
        """
        return self.perform(
            "add_project",
            options,
            project=project,
            insert_after=insert_after,
            insert_before=insert_before,
            section=section,
            extra=data,
        )

    def remove_project(self, project=None, options=None, **data):
        """Remove the task from a project. The task itself remains."""
        return self.perform(
            "remove_project", options, project=project, extra=data
        )

    def tags(self, per_page=None, options=None):
        """The tags of this task"""
        from .tag import Tag

        return self._related_collection(
            "tags", Tag, {"limit": per_page or self.client.page_size}, options
        )

    def add_tag(self, tag=None, options=None, **data):
        return self.perform("add_tag", options, tag=tag, extra=data)

    def remove_tag(self, tag=None, options=None, **data):
        return self.perform("remove_tag", options, tag=tag, extra=data)

    def subtasks(self, per_page=None, options=None):
        """The subtasks of this task"""
        return self._related_collection(
            "subtasks",
            Task,
            {"limit": per_page or self.client.page_size},
            options,
        )

    def add_subtask(self, options=None, **data):
        """Create a subtask of this task

        Returns
        -------
        Task
            the new subtask
        """
        return self.perform("add_subtask", options, extra=data)

    def set_parent(
        self,
        parent=None,
        insert_after=None,
        insert_before=None,
        options=None,
        **data
    ):
        """Change the parent of this task.
        ``insert_after`` and ``insert_before`` must be subtasks
        of the new parent; give at most one of them."""
        return self.perform(
            "set_parent",
            options,
            parent=parent,
            insert_after=insert_after,
            insert_before=insert_before,
            extra=data,
        )

    def stories(self, per_page=None, options=None):
        """The stories (comments, changes) on this task"""
        from .story import Story

        return self._related_collection(
            "stories",
            Story,
            {"limit": per_page or self.client.page_size},
            options,
        )

    def add_comment(self, text=None, options=None, **data):
        """Comment on this task, as the authenticated user

        Returns
        -------
        ~atrium.resources.Story
            the new story
        """
        return self.perform("add_comment", options, text=text, extra=data)

    def insert_in_user_task_list(
        self,
        user_task_list=None,
        insert_before=None,
        insert_after=None,
        options=None,
        **data
    ):
        """Insert or move this task in a user's My Tasks list.
        Without ``insert_before`` or ``insert_after``,
        the task goes to the top of the list."""
        return self.perform(
            "insert_in_user_task_list",
            options,
            user_task_list=user_task_list,
            task=self.gid,
            insert_before=insert_before,
            insert_after=insert_after,
            extra=data,
        )
