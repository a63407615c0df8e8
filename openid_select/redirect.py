# -*- test-case-name: openid_select.test.test_redirect -*-
"""Sending the user's browser to the provider.

Short requests are sent as an HTTP redirect with the arguments in the
query string.  Requests whose URL would be longer than
L{OPENID1_URL_LIMIT} are sent as an HTML form which submits itself.
"""
import logging

from lxml import etree

from openid_select import oidutil
from openid_select.constants import OPENID1_URL_LIMIT

__all__ = ['Redirect', 'Response', 'redirect']

_LOGGER = logging.getLogger(__name__)


class Redirect(object):
    """An indirect request to the provider.

    @ivar server_url: The provider endpoint URL
    @ivar params: The request arguments
    @type params: Dict[str, str]
    @ivar method: C{'GET'} or C{'POST'}, the way the request was sent
    @ivar claimed_id: The normalized identifier the user supplied
    @ivar real_id: The identifier found by discovery
    """
    claimed_id = None
    real_id = None

    def __init__(self, server_url, params, method='GET'):
        self.server_url = server_url
        self.params = dict(params)
        self.method = method

    def toURL(self):
        """Generate a GET URL with the parameters attached as query
        parameters."""
        return oidutil.appendArgs(self.server_url, self.params)

    def shouldSendRedirect(self):
        """Whether the request fits into a GET redirect."""
        return len(self.toURL()) <= OPENID1_URL_LIMIT

    def toFormMarkup(self, form_tag_attrs=None, submit_text='Continue'):
        """Generate HTML form markup that contains the request
        arguments, to be HTTP POSTed as x-www-form-urlencoded UTF-8.

        @param form_tag_attrs: Dictionary of attributes to be added to
            the form tag. 'accept-charset' and 'enctype' have defaults
            that can be overridden. If a value is supplied for
            'action' or 'method', it will be replaced.
        @type form_tag_attrs: Dict[str, str]

        @param submit_text: The text that will appear on the submit
            button for this form.
        @type submit_text: str

        @rtype: str
        """
        form = etree.Element('form', {
            'accept-charset': 'UTF-8',
            'enctype': 'application/x-www-form-urlencoded',
        })

        if form_tag_attrs:
            for name, attr in form_tag_attrs.items():
                form.attrib[name] = attr

        form.attrib['action'] = self.server_url
        form.attrib['method'] = 'post'

        for name, value in sorted(self.params.items()):
            etree.SubElement(form, 'input', {'type': 'hidden', 'name': name, 'value': value})

        etree.SubElement(form, 'input', {'type': 'submit', 'value': submit_text})

        return etree.tostring(form, encoding='unicode')

    def toHTML(self, form_tag_attrs=None):
        """Return a complete page which posts the form on load."""
        return oidutil.autoSubmitHTML(self.toFormMarkup(form_tag_attrs))

    def __repr__(self):
        return '<%s %s %s>' % (self.__class__.__name__, self.method, self.server_url)


class Response(object):
    """Minimal HTTP response the redirect is written to.

    Web framework adapters copy C{status}, C{headers} and C{body} into
    their own response objects.

    @ivar headers_sent: Whether headers were already sent to the
        client; an HTTP redirect is then impossible and the form is
        used instead.
    """

    def __init__(self, headers_sent=False):
        self.status = 200
        self.headers = {}
        self.body = ''
        self.headers_sent = headers_sent

    def setRedirect(self, location):
        self.status = 302
        self.headers['Location'] = location

    def setBody(self, body, content_type='text/html; charset=UTF-8'):
        self.status = 200
        self.headers['Content-Type'] = content_type
        self.body = body


def redirect(server_url, params, response=None, method=None):
    """Send the request to the provider.

    @param server_url: The provider endpoint URL
    @param params: The request arguments
    @type params: Dict[str, str]

    @param response: Response to write the redirect to, or C{None} to
        only build the L{Redirect}
    @type response: Response or NoneType

    @param method: Force C{'GET'} or C{'POST'}; by default GET is used
        unless the URL is too long.

    @rtype: Redirect
    """
    request = Redirect(server_url, params)
    if method is None:
        method = 'GET' if request.shouldSendRedirect() else 'POST'
    if method == 'GET' and response is not None and response.headers_sent:
        method = 'POST'
    request.method = method

    if response is not None:
        if method == 'GET':
            response.setRedirect(request.toURL())
        else:
            response.setBody(request.toHTML())

    _LOGGER.info('Redirecting to %s using %s', server_url, method)
    return request
