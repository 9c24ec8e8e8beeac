from types import MappingProxyType
from typing import Mapping

# Acronyms that keep their canonical casing in CapWords names, following
# PEP 8 ("HTTPServerError", not "HttpServerError").
_INITIALISMS = (
    "ACL",
    "API",
    "ASCII",
    "CPU",
    "CSS",
    "DNS",
    "EOF",
    "GUID",
    "HTML",
    "HTTP",
    "HTTPS",
    "ID",
    "IP",
    "JSON",
    "LHS",
    "QPS",
    "RAM",
    "RHS",
    "RPC",
    "SLA",
    "SMTP",
    "SQL",
    "SSH",
    "TCP",
    "TLS",
    "TTL",
    "UDP",
    "UI",
    "UID",
    "UUID",
    "URI",
    "URL",
    "UTF8",
    "VM",
    "XML",
    "XMPP",
    "XSRF",
    "XSS",
)

INITIALISMS: Mapping[str, str] = MappingProxyType(
    {initialism.lower(): initialism for initialism in _INITIALISMS}
)


def exported(name: str, initialisms: Mapping[str, str] = INITIALISMS) -> str:
    """
    Turns a snake_case identifier into a CapWords one.

    >>> exported("get_user_id")
    'GetUserID'
    """
    words = [word for word in name.strip("_").split("_") if word]
    parts = []
    for word in words:
        canonical = initialisms.get(word.lower())
        if canonical:
            parts.append(canonical)
        else:
            parts.append(word[:1].upper() + word[1:])
    return "".join(parts)
