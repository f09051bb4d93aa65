"""Sample payloads for trying codecs without supplying input."""

import json
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Sample:
    id: str
    name: str
    description: str
    data: str
    file_name: str
    kind: str


_LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Nullam auctor, "
    "nisl eget ultricies tincidunt, nisl nisl aliquam nisl, eget aliquam nisl "
    "nisl eget nisl. Nullam auctor, nisl eget ultricies tincidunt, nisl nisl "
    "aliquam nisl, eget aliquam nisl nisl eget nisl.\n"
)

_USERS = {
    "users": [
        {"id": 1, "name": "John Doe", "email": "john@example.com", "role": "admin", "active": True},
        {"id": 2, "name": "Jane Smith", "email": "jane@example.com", "role": "user", "active": True},
        {"id": 3, "name": "Bob Johnson", "email": "bob@example.com", "role": "user", "active": False},
    ],
    "metadata": {"total": 3, "active": 2, "lastUpdated": "2023-05-20T12:30:45Z"},
}

_CSV_ROWS = ["id,name,department,salary"] + [
    f"{i},Employee {i},{('Engineering', 'Sales', 'Support')[i % 3]},{50000 + i * 1000}"
    for i in range(1, 51)
]

SAMPLES: List[Sample] = [
    Sample(
        id="lorem-ipsum",
        name="Lorem Ipsum Text",
        description="A sample of Lorem Ipsum text",
        data=_LOREM * 10,
        file_name="lorem-ipsum.txt",
        kind="text",
    ),
    Sample(
        id="json-data",
        name="JSON Data",
        description="A sample of JSON data",
        data=json.dumps(_USERS, indent=2),
        file_name="users.json",
        kind="json",
    ),
    Sample(
        id="csv-data",
        name="CSV Data",
        description="A sample employee table in CSV",
        data="\n".join(_CSV_ROWS) + "\n",
        file_name="employees.csv",
        kind="csv",
    ),
]


def list_samples() -> List[Sample]:
    return list(SAMPLES)


def get_sample(sample_id: str) -> Optional[Sample]:
    return next((s for s in SAMPLES if s.id == sample_id), None)


__all__ = ["Sample", "SAMPLES", "list_samples", "get_sample"]
