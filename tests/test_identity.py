from __future__ import annotations

import re

from hookbuttons.core.identity import generate_uuid

_UUID_SHAPE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def test_uuid_is_derived_from_sha1_of_name() -> None:
    assert generate_uuid("Front Door") == "4ffef822-6592-43bb-898a-028dd181bd69"


def test_uuid_is_deterministic_and_well_formed() -> None:
    first = generate_uuid("Garage")
    assert first == generate_uuid("Garage")
    assert _UUID_SHAPE.match(first)


def test_distinct_names_yield_distinct_uuids() -> None:
    names = ["Front Door", "front door", "Front-Door", "Garage", "Kitchen"]
    assert len({generate_uuid(name) for name in names}) == len(names)
