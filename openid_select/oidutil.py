"""Small helpers shared by the library modules."""
import binascii
from urllib.parse import urlencode

__all__ = ['appendArgs', 'autoSubmitHTML', 'fromBase64', 'force_text']

AUTO_SUBMIT_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>%(title)s</title>
</head>
<body onload="document.forms[0].submit();">
%(form)s
<script>
var inputs = document.forms[0].elements;
for (var i = 0; i < inputs.length; i++) {
  inputs[i].style.display = "none";
}
</script>
</body>
</html>
"""


def autoSubmitHTML(form, title='Redirecting to your OpenID provider'):
    """Wrap the form markup into a page which submits the first form
    as soon as it loads.  The submit button stays visible only for
    browsers without JavaScript."""
    return AUTO_SUBMIT_PAGE % {'title': title, 'form': form}


def appendArgs(url, args):
    """Return the URL with the arguments added to its query.

    Existing query arguments are kept.  Dictionaries are added in the
    order of their sorted keys, sequences of pairs in their own order.

    @type url: str
    @type args: Union[Dict[str, str], List[Tuple[str, str]]]
    @rtype: str
    """
    pairs = sorted(args.items()) if hasattr(args, 'items') else list(args)
    if not pairs:
        return url
    separator = '&' if '?' in url else '?'
    return url + separator + urlencode(pairs)


def fromBase64(data):
    """Decode base64 encoded data.

    @type data: str
    @rtype: bytes
    @raise ValueError: If the data are not valid base64.
    """
    try:
        return binascii.a2b_base64(data)
    except binascii.Error as error:
        raise ValueError('Invalid base64 data: %s' % error)


def force_text(value, encoding='utf-8'):
    """Return text for the value; bytes are decoded with undecodable
    sequences replaced."""
    if isinstance(value, bytes):
        return value.decode(encoding, 'replace')
    return str(value)
