import re

# name=<ident> inside the protobuf:"..." part of a struct tag. Tags written as
# interpreted strings escape the inner quotes.
PROTOBUF_NAME = re.compile(r'protobuf:\\?"[^"]*?\bname=([_a-zA-Z][_a-zA-Z0-9]*)')


def tag_name(tag):
    """Returns the protobuf field name from a raw struct tag, or ""."""
    if not tag:
        return ""
    m = PROTOBUF_NAME.search(tag)
    if m:
        return m.group(1)
    return ""
