"""Reflection checker: plain substring containment of the decoded value."""


class Reflection:
    """
    A parameter is reflected when its decoded value appears verbatim in
    the response body.

    No case folding, entity decoding or whitespace normalisation. Empty
    values are never reported, since "" is contained in any body.
    """

    def detect(self, body: str, decoded_value: str) -> bool:
        if not decoded_value:
            return False
        return decoded_value in body
