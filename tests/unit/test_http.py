# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import pytest
from nosql_signers import Field, Fields, NoSQLRequest
from nosql_signers.interfaces.http import Request


def test_field_single_valued_basics() -> None:
    field = Field(name="fname", values=["fval"])
    assert field.name == "fname"
    assert field.values == ["fval"]
    assert field.as_string() == "fval"


@pytest.mark.parametrize(
    "values,expected",
    [
        ([], ""),
        (["val1"], "val1"),
        (['"val1"'], '"val1"'),
        (
            ['Signature headers="(request-target) host date"'],
            'Signature headers="(request-target) host date"',
        ),
        (["val1", "val2"], "val1, val2"),
    ],
)
def test_field_serialization(values: list[str], expected: str) -> None:
    field = Field(name="_", values=values)
    assert field.as_string() == expected


def test_fields_are_case_insensitive() -> None:
    fields = Fields([Field(name="Authorization", values=["sig"])])
    assert "authorization" in fields
    assert fields["AUTHORIZATION"].as_string() == "sig"
    assert fields.get("date") is None
    del fields["authorization"]
    assert len(fields) == 0


def test_fields_repeated_names_rejected() -> None:
    with pytest.raises(ValueError, match="date"):
        Fields([Field(name="Date", values=["a"]), Field(name="date", values=["b"])])


def test_fields_key_must_match_field_name() -> None:
    fields = Fields()
    with pytest.raises(ValueError):
        fields["Date"] = Field(name="Authorization", values=["sig"])


def test_fields_set_field_replaces_entry() -> None:
    fields = Fields(
        [
            Field(name="authorization", values=["stale"]),
            Field(name="Content-Type", values=["application/json"]),
        ]
    )
    fields.set_field(Field(name="Authorization", values=["fresh"]))
    fields.set_field(Field(name="Date", values=["Tue, 01 Jan 2030 00:00:00 GMT"]))
    assert [f.name for f in fields] == ["Authorization", "Content-Type", "Date"]
    assert fields["authorization"].values == ["fresh"]


def test_request() -> None:
    request = NoSQLRequest(compartment="ocid1.compartment.acme")
    assert isinstance(request, Request)
    assert request.compartment == "ocid1.compartment.acme"
    assert len(request.fields) == 0
    assert NoSQLRequest().compartment is None
