"""In-memory stand-in for the slice of the Firestore client the tools use."""
import copy
from typing import Any, Dict, List, Optional, Tuple

from google.api_core.exceptions import NotFound


Path = Tuple[str, ...]


class FakeSnapshot:
    def __init__(self, reference: "FakeDocumentRef", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data)


class FakeDocumentRef:
    def __init__(self, client: "FakeFirestore", path: Path):
        self._client = client
        self.path = path

    @property
    def id(self) -> str:
        return self.path[-1]

    def collection(self, name: str) -> "FakeCollectionRef":
        return FakeCollectionRef(self._client, self.path + (name,))

    def get(self) -> FakeSnapshot:
        self._client.reads += 1
        return FakeSnapshot(self, self._client.docs.get(self.path))

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        self._client._apply(("set", self.path, data, merge))

    def update(self, data: Dict[str, Any]) -> None:
        self._client._apply(("update", self.path, data, True))


class FakeCollectionRef:
    def __init__(self, client: "FakeFirestore", path: Path):
        self._client = client
        self.path = path

    def document(self, doc_id: str) -> FakeDocumentRef:
        return FakeDocumentRef(self._client, self.path + (doc_id,))

    def stream(self):
        self._client.reads += 1
        depth = len(self.path) + 1
        ids = sorted(p[-1] for p in self._client.docs if len(p) == depth and p[:-1] == self.path)
        for doc_id in ids:
            ref = self.document(doc_id)
            yield FakeSnapshot(ref, self._client.docs[ref.path])


class FakeBatch:
    def __init__(self, client: "FakeFirestore"):
        self._client = client
        self._ops: List[tuple] = []

    def set(self, ref: FakeDocumentRef, data: Dict[str, Any], merge: bool = False) -> None:
        self._ops.append(("set", ref.path, data, merge))

    def update(self, ref: FakeDocumentRef, data: Dict[str, Any]) -> None:
        self._ops.append(("update", ref.path, data, True))

    def commit(self) -> None:
        self._client.commits += 1
        for op in self._ops:
            self._client._apply(op)
        self._ops = []


class FakeFirestore:
    def __init__(self, docs: Optional[Dict[str, Dict[str, Any]]] = None):
        self.docs: Dict[Path, Dict[str, Any]] = {}
        self.reads = 0
        self.writes = 0
        self.commits = 0
        for slash_path, data in (docs or {}).items():
            self.docs[tuple(slash_path.split("/"))] = copy.deepcopy(data)

    def collection(self, name: str) -> FakeCollectionRef:
        return FakeCollectionRef(self, (name,))

    def batch(self) -> FakeBatch:
        return FakeBatch(self)

    def doc(self, slash_path: str) -> Optional[Dict[str, Any]]:
        return self.docs.get(tuple(slash_path.split("/")))

    def _apply(self, op: tuple) -> None:
        kind, path, data, merge = op
        if kind == "update" and path not in self.docs:
            raise NotFound(f"No document to update: {'/'.join(path)}")
        if merge and path in self.docs:
            self.docs[path].update(copy.deepcopy(data))
        else:
            self.docs[path] = copy.deepcopy(data)
        self.writes += 1
