"""Response parsing for the MonkeyLearn client.

This module turns raw API response bodies into Result objects. Decoding is
lenient about key casing: the API (and older clients) use both
``"classifications"`` and ``"Classifications"``.
"""
import json
import logging
import math
from typing import Any, Dict, List, Optional, Union

from .entities import Classification, Extraction, Result
from .exceptions import ParseError


def _lower_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of data with lower-cased keys."""
    return {str(key).lower(): value for key, value in data.items()}


class ResponseParser:
    """Parses API responses into structured results."""

    @staticmethod
    def parse_results(body: Union[bytes, str]) -> List[Result]:
        """Parse a response body holding a JSON array of results.

        Args:
            body: Raw response body.

        Returns:
            Results in the order returned by the API.

        Raises:
            ParseError: If the body is not a JSON array of result objects.
        """
        if isinstance(body, bytes):
            try:
                body = body.decode('utf-8')
            except UnicodeDecodeError as e:
                raise ParseError(
                    f'Response body is not valid UTF-8: {e}',
                    parse_type='encoding',
                ) from e

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ParseError(
                f'Failed to parse response JSON: {e}',
                parse_type='json',
                content=body[:500],
            ) from e

        if not isinstance(data, list):
            raise ParseError(
                f'Response must be a JSON array, got {type(data).__name__}',
                parse_type='results',
                content=body[:500],
            )

        results = [ResponseParser.parse_result(item) for item in data]
        logging.debug('Parsed %d results from response', len(results))
        return results

    @staticmethod
    def parse_result(item: Any) -> Result:
        """Parse a single result object.

        Args:
            item: Decoded JSON object for one document.

        Returns:
            The Result.

        Raises:
            ParseError: If the object or any of its annotations is malformed.
        """
        if not isinstance(item, dict):
            raise ParseError(
                f'Result must be a JSON object, got {type(item).__name__}',
                parse_type='result',
            )

        data = _lower_keys(item)
        external_id = ResponseParser._parse_external_id(data.get('external_id'))

        try:
            classifications = [
                ResponseParser.parse_classification(c)
                for c in ResponseParser._as_list(data.get('classifications'), 'classifications')
            ]
            extractions = [
                ResponseParser.parse_extraction(e)
                for e in ResponseParser._as_list(data.get('extractions'), 'extractions')
            ]
        except ParseError as e:
            e.external_id = external_id
            raise

        is_error = data.get('error')
        if is_error is None:
            is_error = False
        elif not isinstance(is_error, bool):
            raise ParseError(
                f'Result error flag must be a JSON boolean, got {is_error!r}',
                external_id=external_id,
                parse_type='result',
            )

        text = data.get('text')
        error_detail = data.get('error_detail')
        return Result(
            text='' if text is None else str(text),
            external_id=external_id,
            is_error=is_error,
            error_detail='' if error_detail is None else str(error_detail),
            classifications=classifications,
            extractions=extractions,
        )

    @staticmethod
    def parse_classification(item: Any) -> Classification:
        """Parse a classification object.

        Raises:
            ParseError: If fields are missing or have the wrong type.
        """
        if not isinstance(item, dict):
            raise ParseError('Classification must be a JSON object', parse_type='classification')
        data = _lower_keys(item)

        try:
            tag_id = int(data.get('tag_id', 0))
            confidence = float(data.get('confidence', 0.0))
        except (TypeError, ValueError) as e:
            raise ParseError(
                f'Invalid classification data: {e}',
                parse_type='classification',
                content=json.dumps(item),
            ) from e

        if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
            raise ParseError(
                f'Classification confidence out of range [0, 1]: {confidence}',
                parse_type='classification',
                content=json.dumps(item),
            )

        return Classification(
            tag_name=str(data.get('tag_name', '')),
            tag_id=tag_id,
            confidence=confidence,
        )

    @staticmethod
    def parse_extraction(item: Any) -> Extraction:
        """Parse an extraction object.

        Raises:
            ParseError: If the offset span is not a pair of integers.
        """
        if not isinstance(item, dict):
            raise ParseError('Extraction must be a JSON object', parse_type='extraction')
        data = _lower_keys(item)

        span = data.get('offset_span')
        offset_span = None
        if span is not None:
            if (not isinstance(span, list) or len(span) != 2
                    or not all(isinstance(v, int) and not isinstance(v, bool) for v in span)):
                raise ParseError(
                    f'Extraction offset_span must be a pair of integers, got {span!r}',
                    parse_type='extraction',
                    content=json.dumps(item),
                )
            offset_span = (span[0], span[1])

        extracted_text = data.get('extracted_text')
        return Extraction(
            tag_name=str(data.get('tag_name', '')),
            extracted_text='' if extracted_text is None else str(extracted_text),
            offset_span=offset_span,
            parsed_value=data.get('parsed_value'),
        )

    @staticmethod
    def _parse_external_id(value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, (dict, list)):
            raise ParseError(
                f'external_id must be a scalar, got {type(value).__name__}',
                parse_type='result',
            )
        return str(value)

    @staticmethod
    def _as_list(value: Any, name: str) -> List[Any]:
        # Missing or null annotation lists decode as empty
        if value is None:
            return []
        if not isinstance(value, list):
            raise ParseError(f'{name} must be a list', parse_type=name)
        return value
