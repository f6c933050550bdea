"""The resource base class: hydration, refresh-in-place, and
relationship actions"""
import enum
import logging
import typing as t

from .attributes import AttributeBag, Field
from .collection import Collection, Page
from .errors import MalformedResponse, ResourceDeleted
from .params import build, fill_path

__all__ = [
    "Resource",
    "Action",
    "Returns",
    "REFRESH",
    "ACKNOWLEDGE",
    "related",
]

logger = logging.getLogger(__name__)


class Returns(enum.Enum):
    """How to handle the response of a relationship action"""

    REFRESH = "refresh"
    """the response is the updated record: refresh in place"""
    ACKNOWLEDGE = "acknowledge"
    """the response is an empty acknowledgement: return ``True``"""


REFRESH = Returns.REFRESH
ACKNOWLEDGE = Returns.ACKNOWLEDGE


class related(t.NamedTuple):
    """The response holds records of a declared type,
    to be wrapped as a new resource or a collection.

    Parameters
    ----------
    type_name: str
        the class name of the resource, see :attr:`Resource.registry`
    many: bool
        whether the response is a list of records
    """

    type_name: str
    many: bool = False


class Action(t.NamedTuple):
    """A POST operation on a resource's relationships

    Parameters
    ----------
    path: str
        path template. ``{gid}`` is the resource's gid; other names
        are taken (and removed) from the arguments.
    arguments: ~typing.Type[~atrium.params.Arguments]
        the argument structure of the action
    returns: Returns or related
        how to handle the response
    """

    path: str
    arguments: type
    returns: t.Union[Returns, related]


class Resource:
    """Base class for API resources.

    Subclasses declare their ``plural_name``, their fields
    (as :class:`~atrium.attributes.Field` attributes),
    and their relationship ``actions``.

    An instance holds one :class:`~atrium.attributes.AttributeBag`:
    the server's view of the record as of the last round trip.
    Mutating operations replace the bag as a whole.

    Parameters
    ----------
    record: ~typing.Mapping[str, object]
        the parsed record
    client: ~atrium.Client
        the client used for further operations
    """

    #: the path segment of the resource, e.g. ``tasks``
    plural_name: t.ClassVar[t.Optional[str]] = None
    #: the declared fields, by attribute name
    fields: t.ClassVar[t.Dict[str, Field]] = {}
    #: relationship actions, by method name
    actions: t.ClassVar[t.Dict[str, Action]] = {}
    #: all resource classes, by class name
    registry: t.ClassVar[t.Dict[str, type]] = {}

    gid = Field()
    resource_type = Field()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        collected = {}
        for klass in reversed(cls.__mro__):
            collected.update(
                (name, obj)
                for name, obj in vars(klass).items()
                if isinstance(obj, Field)
            )
        cls.fields = collected
        Resource.registry[cls.__name__] = cls

    def __init__(self, record, client):
        self._client = client
        self._attributes = AttributeBag.load(record)
        self._deleted = False

    @classmethod
    def load(cls, record, client):
        """wrap a parsed record as an instance of this type"""
        return cls(record, client)

    @property
    def attributes(self):
        """the current snapshot of the record"""
        return self._attributes

    @property
    def client(self):
        return self._client

    @property
    def deleted(self):
        """whether :meth:`delete` succeeded on this instance"""
        return self._deleted

    def __getattr__(self, name):
        # only called for names which are not declared
        if name.startswith("_"):
            raise AttributeError(name)
        return self._attributes.get(name)

    def __getitem__(self, key):
        return self._attributes[key]

    def to_dict(self):
        """the declared fields, by their record keys"""
        return self._attributes.project(f.key for f in self.fields.values())

    def refresh_with(self, record):
        """Replace the snapshot with a newly returned record

        Returns
        -------
        Resource
            this instance
        """
        self._attributes = AttributeBag.load(record)
        return self

    @classmethod
    def _path(cls, gid):
        if cls.plural_name is None:
            raise TypeError(
                "{} has no endpoint of its own".format(cls.__name__)
            )
        return "/{}/{}".format(cls.plural_name, gid)

    @classmethod
    def _hydrate(cls, client, response):
        records, _ = client.parse(response)
        return cls.load(_single(records, response), client)

    @classmethod
    def find_by_id(cls, client, id, options=None):
        """Retrieve the complete record for a single resource

        Parameters
        ----------
        client: ~atrium.Client
            the client to use
        id: str
            the gid of the resource
        options: ~typing.Mapping or None
            the request options

        Raises
        ------
        ~atrium.errors.NotFound
            if there is no such resource
        """
        build({"id": id}, required=["id"])
        return cls._hydrate(client, client.get(cls._path(id), options=options))

    def _ensure_live(self):
        if self._deleted:
            raise ResourceDeleted(
                "{} {} was deleted".format(type(self).__name__, self.gid)
            )

    def update(self, options=None, **data):
        """Update the given fields only, and refresh this instance
        with the complete record returned.

        Fields not given are not sent, so are left unchanged on the server.

        Returns
        -------
        Resource
            this instance
        """
        self._ensure_live()
        response = self._client.put(
            self._path(self.gid), body=build(data), options=options
        )
        records, _ = self._client.parse(response)
        return self.refresh_with(_single(records, response))

    def delete(self):
        """Delete the resource on the server.

        Afterwards, this instance may no longer be used
        for server operations.

        Returns
        -------
        bool
            ``True``
        """
        self._ensure_live()
        self._client.delete(self._path(self.gid))
        self._deleted = True
        logger.debug("deleted %s %s", type(self).__name__, self.gid)
        return True

    def _related_collection(self, subpath, rtype, params=None, options=None):
        self._ensure_live()
        return Collection.fetch(
            self._client,
            "{}/{}".format(self._path(self.gid), subpath),
            rtype,
            params=build(params or {}),
            options=options,
        )

    def perform(self, name, options=None, **kwargs):
        """Run one of the resource's relationship actions.

        Parameters
        ----------
        name: str
            the key in :attr:`actions`
        options: ~typing.Mapping or None
            the request options
        **kwargs
            the action's arguments

        Returns
        -------
        Resource, Collection or bool
            depending on what the action returns
        """
        action = self.actions[name]
        body = action.arguments(**kwargs).build()
        self._ensure_live()
        path, body = fill_path(action.path, dict(body, gid=self.gid))
        # the gid only ever goes into the path
        body.pop("gid", None)
        response = self._client.post(path, body=body, options=options)
        if action.returns is ACKNOWLEDGE:
            return True
        if action.returns is REFRESH:
            records, _ = self._client.parse(response)
            return self.refresh_with(_single(records, response))
        rtype = Resource.registry[action.returns.type_name]
        page = self._client.parse(response)
        if action.returns.many:
            # action responses are never paginated
            return Collection(
                Page(page.content), rtype, self._client, path, options=options
            )
        return rtype.load(_single(page.content, response), self._client)

    def __repr__(self):
        name = self._attributes.get("name")
        return "<{}: {}{}>".format(
            type(self).__name__,
            self._attributes.get("gid"),
            "" if name is None else " {!r}".format(name),
        )


Resource.fields = {
    "gid": Resource.gid,
    "resource_type": Resource.resource_type,
}


def _single(records, response):
    if len(records) != 1:
        raise MalformedResponse(
            "expected a single record, got {}".format(len(records)),
            response=response,
        )
    return records[0]
