"""Tests for API response parsing."""

import json

import pytest

from monkeylearn_client.processing import (
    Classification,
    DocumentError,
    Extraction,
    ParseError,
    ResponseParser,
)


def _body(items) -> bytes:
    return json.dumps(items).encode('utf-8')


class TestParseResults:
    def test_classification_result(self) -> None:
        body = _body([{
            'text': 'great product',
            'external_id': 'a1',
            'error': False,
            'error_detail': None,
            'classifications': [
                {'tag_name': 'Positive', 'tag_id': 7, 'confidence': 0.98},
            ],
        }])

        [result] = ResponseParser.parse_results(body)

        assert result.text == 'great product'
        assert result.external_id == 'a1'
        assert result.is_error is False
        assert result.error_detail == ''
        assert result.classifications == [Classification('Positive', 7, 0.98)]
        assert result.extractions == []

    def test_extraction_result(self) -> None:
        body = _body([{
            'text': 'Call me on Monday',
            'external_id': None,
            'extractions': [{
                'tag_name': 'DATE',
                'extracted_text': 'Monday',
                'offset_span': [11, 17],
                'parsed_value': {'weekday': 1},
            }],
        }])

        [result] = ResponseParser.parse_results(body)

        assert result.external_id is None
        assert result.extractions == [
            Extraction('DATE', 'Monday', (11, 17), {'weekday': 1})
        ]

    def test_keys_are_case_insensitive(self) -> None:
        body = _body([{
            'Text': 'x',
            'External_Id': 'k',
            'Classifications': [{'Tag_Name': 'T', 'Tag_Id': 1, 'Confidence': 0.5}],
        }])

        [result] = ResponseParser.parse_results(body)

        assert result.external_id == 'k'
        assert result.classifications[0].tag_name == 'T'

    def test_null_annotation_lists_decode_as_empty(self) -> None:
        [result] = ResponseParser.parse_results(_body([
            {'text': 'x', 'classifications': None, 'extractions': None}
        ]))

        assert result.classifications == []
        assert result.extractions == []

    def test_numeric_external_id_becomes_string(self) -> None:
        [result] = ResponseParser.parse_results(_body([{'text': 'x', 'external_id': 12}]))

        assert result.external_id == '12'

    def test_order_is_preserved(self) -> None:
        results = ResponseParser.parse_results(_body([
            {'text': str(i), 'external_id': str(i)} for i in range(4)
        ]))

        assert [r.external_id for r in results] == ['0', '1', '2', '3']

    def test_per_document_error(self) -> None:
        [result] = ResponseParser.parse_results(_body([
            {'text': '', 'external_id': 'bad', 'error': True, 'error_detail': 'Empty text'}
        ]))

        assert result.is_error
        error = result.error()
        assert isinstance(error, DocumentError)
        assert str(error) == 'Empty text'
        assert error.external_id == 'bad'

    def test_successful_result_has_no_error(self) -> None:
        [result] = ResponseParser.parse_results(_body([{'text': 'x'}]))

        assert result.error() is None

    def test_null_error_flag_means_success(self) -> None:
        [result] = ResponseParser.parse_results(_body([{'text': 'x', 'error': None}]))

        assert result.is_error is False

    def test_str_body(self) -> None:
        assert ResponseParser.parse_results('[]') == []


class TestParseErrors:
    @pytest.mark.parametrize('body, parse_type', [
        (b'not json', 'json'),
        (b'\xff\xfe', 'encoding'),
        (b'{"text": "x"}', 'results'),
    ])
    def test_malformed_body(self, body, parse_type) -> None:
        with pytest.raises(ParseError) as exc_info:
            ResponseParser.parse_results(body)

        assert exc_info.value.parse_type == parse_type

    def test_result_must_be_an_object(self) -> None:
        with pytest.raises(ParseError):
            ResponseParser.parse_results(_body(['text']))

    @pytest.mark.parametrize('flag', ['false', 'true', 0, 1, []])
    def test_error_flag_must_be_boolean(self, flag) -> None:
        with pytest.raises(ParseError) as exc_info:
            ResponseParser.parse_results(_body([{'external_id': 'e1', 'error': flag}]))

        assert exc_info.value.parse_type == 'result'
        assert exc_info.value.external_id == 'e1'

    @pytest.mark.parametrize('confidence', [1.5, -0.1, 'high'])
    def test_invalid_confidence(self, confidence) -> None:
        body = _body([{
            'external_id': 'c1',
            'classifications': [{'tag_name': 'T', 'tag_id': 1, 'confidence': confidence}],
        }])

        with pytest.raises(ParseError) as exc_info:
            ResponseParser.parse_results(body)

        assert exc_info.value.external_id == 'c1'

    @pytest.mark.parametrize('span', [[1], [1, 2, 3], ['a', 'b'], 'bad'])
    def test_invalid_offset_span(self, span) -> None:
        body = _body([{
            'extractions': [{'tag_name': 'T', 'extracted_text': 'x', 'offset_span': span}],
        }])

        with pytest.raises(ParseError):
            ResponseParser.parse_results(body)

    def test_annotations_must_be_lists(self) -> None:
        with pytest.raises(ParseError):
            ResponseParser.parse_results(_body([{'classifications': {'tag_name': 'T'}}]))
