"""Jobs: asynchronous server-side operations, such as duplication"""
from ..attributes import Field
from ..resource import Resource

__all__ = ["Job"]


class Job(Resource):
    """A server-side operation in progress.
    Poll it with :meth:`~atrium.Resource.find_by_id`."""

    plural_name = "jobs"

    resource_subtype = Field()
    status = Field()
    new_project = Field()
    new_task = Field()

    @property
    def finished(self):
        return self.status in ("succeeded", "failed")
