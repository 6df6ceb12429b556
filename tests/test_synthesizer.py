"""
Unit tests for request synthesis and the Graph-specific fixups.
"""

import json

from graph_mcp.binder import BoundArguments, StructuredBody, bind_arguments
from graph_mcp.catalog import EndpointDescriptor, ParameterLocation, ParameterSpec
from graph_mcp.synthesizer import (
    SynthesizedRequest,
    build_query_string,
    is_excel_workbook_request,
    is_media_content_request,
    synthesize_request,
)


def _excel_descriptor(name="get-excel-range", method="GET"):
    return EndpointDescriptor(
        name=name,
        method=method,
        path="/me/drive/root:{file}:/workbook/worksheets",
        parameters=(ParameterSpec("file", ParameterLocation.PATH),),
    )


class TestGenericSynthesis:

    def test_get_item_example(self, get_item):
        request = synthesize_request(get_item, bind_arguments(get_item, {"id": "42"}))
        assert request.method == "GET"
        assert request.url == "/items/42"
        assert request.body is None
        assert "body" not in request.to_options()

    def test_filter_query_example(self, list_messages):
        request = synthesize_request(
            list_messages, bind_arguments(list_messages, {"filter": "a eq 1"})
        )
        assert request.query_string == "$filter=a%20eq%201"
        assert request.url == "/me/messages?$filter=a%20eq%201"

    def test_query_appended_to_existing_marker(self):
        descriptor = EndpointDescriptor(
            name="delta",
            method="GET",
            path="/me/messages/delta?changeType=created",
            parameters=(ParameterSpec("top", ParameterLocation.QUERY),),
        )
        request = synthesize_request(descriptor, bind_arguments(descriptor, {"top": 5}))
        assert request.url == "/me/messages/delta?changeType=created&$top=5"

    def test_query_string_escapes_keys_and_values(self):
        query = build_query_string({"$search": '"a&b"', "x y": "1"})
        assert query == "$search=%22a%26b%22&x%20y=1"

    def test_method_upper_cased(self, send_mail):
        request = synthesize_request(send_mail, BoundArguments(path="/me/sendMail"))
        assert request.method == "POST"

    def test_structured_body_serialized(self, send_mail):
        bound = bind_arguments(send_mail, {"body": '{"message": {"subject": "hi"}}'})
        request = synthesize_request(send_mail, bound)
        assert json.loads(request.body) == {"message": {"subject": "hi"}}

    def test_raw_body_sent_unchanged(self, send_mail):
        bound = bind_arguments(send_mail, {"body": "{not json"})
        request = synthesize_request(send_mail, bound)
        assert request.body == "{not json"

    def test_get_never_carries_body(self, get_item):
        bound = BoundArguments(path="/items/1", body=StructuredBody({"a": 1}))
        request = synthesize_request(get_item, bound)
        assert request.body is None

    def test_null_body_not_attached(self, send_mail):
        bound = BoundArguments(path="/me/sendMail", body=StructuredBody(None))
        assert synthesize_request(send_mail, bound).body is None

    def test_headers_copied(self, list_messages):
        bound = bind_arguments(list_messages, {"ConsistencyLevel": "eventual"})
        request = synthesize_request(list_messages, bound)
        assert request.to_options()["headers"] == {"ConsistencyLevel": "eventual"}


class TestExcelFixup:

    def test_file_path_extracted(self):
        descriptor = _excel_descriptor()
        bound = BoundArguments(path="/me/drive/root:/Reports/q1.xlsx:/workbook/worksheets")
        request = synthesize_request(descriptor, bound)
        assert request.excel_file == "/Reports/q1.xlsx"
        assert request.to_options()["excel_file"] == "/Reports/q1.xlsx"

    def test_requires_excel_marker_in_name(self):
        descriptor = _excel_descriptor(name="list-worksheets")
        bound = BoundArguments(path="/me/drive/root:/q1.xlsx:/workbook/worksheets")
        request = synthesize_request(descriptor, bound)
        assert request.excel_file is None

    def test_requires_workbook_in_path(self):
        descriptor = _excel_descriptor()
        request = SynthesizedRequest(method="GET", path="/me/drive/root:/q1.xlsx:")
        assert not is_excel_workbook_request(descriptor, request)

    def test_no_match_leaves_hint_unset(self):
        descriptor = _excel_descriptor()
        bound = BoundArguments(path="/drives/d1/items/i1/workbook/worksheets")
        request = synthesize_request(descriptor, bound)
        assert request.excel_file is None


class TestMediaFixup:

    def test_content_suffix(self, get_item):
        request = SynthesizedRequest(method="GET", path="/drives/d/items/i/content")
        assert is_media_content_request(get_item, request)

    def test_error_hint(self):
        descriptor = EndpointDescriptor(
            name="get-photo",
            method="GET",
            path="/me/photo/$value",
            error_hints=frozenset(["Retrieved media content"]),
        )
        request = synthesize_request(descriptor, BoundArguments(path=descriptor.path))
        assert request.raw_response is True
        assert request.to_options()["raw_response"] is True

    def test_plain_request_not_raw(self, get_item):
        request = synthesize_request(get_item, BoundArguments(path="/items/1"))
        assert request.raw_response is False
        assert "raw_response" not in request.to_options()


def test_custom_fixups_are_applied_in_order(get_item):
    calls = []
    fixups = [
        (lambda d, r: True, lambda d, r: calls.append("first")),
        (lambda d, r: False, lambda d, r: calls.append("skipped")),
        (lambda d, r: True, lambda d, r: calls.append("second")),
    ]
    synthesize_request(get_item, BoundArguments(path="/items/1"), fixups=fixups)
    assert calls == ["first", "second"]
