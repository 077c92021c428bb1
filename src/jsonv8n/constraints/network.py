"""Network address constraints; non-string values always fail."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar
from urllib.parse import urlsplit

from jsonv8n.constants import MSG_VALID_CIDR, MSG_VALID_HOSTNAME, MSG_VALID_IP, MSG_VALID_URL
from jsonv8n.constraints.base import CheckResult, Constraint
from jsonv8n.constraints.strings import valid_hostname

if TYPE_CHECKING:
    from jsonv8n.context import ValidatorContext

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


def acceptable_ip(
    address: IPAddress,
    *,
    v4_only: bool,
    v6_only: bool,
    disallow_private: bool,
    disallow_loopback: bool,
) -> bool:
    if v4_only and address.version != 4:
        return False
    if v6_only and address.version != 6:
        return False
    if disallow_private and address.is_private and not address.is_loopback:
        return False
    return not (disallow_loopback and address.is_loopback)


@dataclass
class _AddressConstraint(Constraint):
    v4_only: bool = False
    v6_only: bool = False
    disallow_loopback: bool = False
    disallow_private: bool = False
    message: str = field(default="", metadata={"default": True})

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, str) or (self.v4_only and self.v6_only):
            return self.failed(ctx)
        address = self.parse(value)
        if address is None:
            return self.failed(ctx)
        return self.outcome(
            acceptable_ip(
                address,
                v4_only=self.v4_only,
                v6_only=self.v6_only,
                disallow_private=self.disallow_private,
                disallow_loopback=self.disallow_loopback,
            ),
            ctx,
        )

    def parse(self, text: str) -> IPAddress | None:
        raise NotImplementedError


@dataclass
class NetIsIP(_AddressConstraint):
    allow_localhost: bool = False

    default_template: ClassVar[str] = MSG_VALID_IP

    def parse(self, text: str) -> IPAddress | None:
        if self.allow_localhost and text == "localhost":
            text = "::1" if self.v6_only else "127.0.0.1"
        try:
            return ipaddress.ip_address(text)
        except ValueError:
            return None


@dataclass
class NetIsCIDR(_AddressConstraint):
    default_template: ClassVar[str] = MSG_VALID_CIDR

    def parse(self, text: str) -> IPAddress | None:
        if "/" not in text:
            return None
        try:
            return ipaddress.ip_interface(text).ip
        except ValueError:
            return None


@dataclass
class NetIsHostname(Constraint):
    allow_ip_address: bool = False
    allow_local: bool = False

    default_template: ClassVar[str] = MSG_VALID_HOSTNAME

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, str):
            return self.failed(ctx)
        acceptable = host_acceptable(
            value, allow_ip_address=self.allow_ip_address, allow_local=self.allow_local
        )
        return self.outcome(acceptable, ctx)


def host_acceptable(host: str, *, allow_ip_address: bool, allow_local: bool) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return valid_hostname(host, allow_local=allow_local)
    return allow_ip_address


@dataclass
class NetIsURL(Constraint):
    """Absolute URL with a scheme and a host; ``check_host`` also validates the host name."""

    check_host: bool = field(default=False, metadata={"default": True})
    allow_ip_address: bool = False
    allow_local: bool = False

    default_template: ClassVar[str] = MSG_VALID_URL

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not isinstance(value, str):
            return self.failed(ctx)
        return self.outcome(self._valid(value.split("#", 1)[0]), ctx)

    def _valid(self, text: str) -> bool:
        if not text or any(ch.isspace() for ch in text):
            return False
        try:
            parts = urlsplit(text)
            host = parts.hostname
        except ValueError:
            return False
        if not parts.scheme or not parts.netloc or not host:
            return False
        if not self.check_host:
            return True
        return host_acceptable(
            host, allow_ip_address=self.allow_ip_address, allow_local=self.allow_local
        )


__all__ = ["NetIsCIDR", "NetIsHostname", "NetIsIP", "NetIsURL", "acceptable_ip"]
