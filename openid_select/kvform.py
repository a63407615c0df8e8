"""Parsing of key-value form, the encoding of direct responses from an
OpenID provider, e.g. the response to an association request::

    assoc_type:HMAC-SHA1
    expires_in:1209600
"""
import logging

__all__ = ['kvToSeq', 'kvToDict', 'KVFormError']

_LOGGER = logging.getLogger(__name__)


class KVFormError(ValueError):
    """The response is not valid key-value form."""


def kvToSeq(data, strict=False):
    """Split the response into its key-value pairs.

    Blank lines are skipped and whitespace around keys and values is
    removed.  Other deviations from the format are logged and the
    offending lines skipped, unless C{strict} is set.

    @type data: str

    @param strict: Raise L{KVFormError} instead of logging deviations.
    @type strict: bool

    @rtype: List[Tuple[str, str]]
    """
    problems = []
    lines = data.split('\n')
    if lines[-1]:
        problems.append('missing trailing newline')
    else:
        lines.pop()

    pairs = []
    for line_num, line in enumerate(lines, 1):
        if not line.strip():
            continue
        if ':' not in line:
            problems.append('line %d has no colon' % line_num)
            continue

        key, value = (part.strip() for part in line.split(':', 1))
        if not key:
            problems.append('line %d has an empty key' % line_num)
        pairs.append((key, value))

    if problems:
        message = 'Malformed key-value form (%s): %r' % ('; '.join(problems), data)
        if strict:
            raise KVFormError(message)
        _LOGGER.debug(message)
    return pairs


def kvToDict(data, strict=False):
    """Parse the response into a dictionary; the last of repeated keys
    wins."""
    return dict(kvToSeq(data, strict))
