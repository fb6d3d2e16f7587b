"""Pydantic models for VLAN / macvlan provisioning."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

from fedorasetup.validators import (
    IP_MESSAGE,
    NETWORK_NAME_MESSAGE,
    SUBNET_MESSAGE,
    VLAN_ID_MAX,
    VLAN_ID_MIN,
    validate_ip,
    validate_network_name,
    validate_not_empty,
    validate_subnet,
)


class ShimConfig(BaseModel):
    """Host-side macvlan interface that lets the host reach its containers.

    ``parent`` defaults to the VLAN interface when left empty.
    """

    parent: str = ""
    address: Optional[str] = None

    @field_validator("address")
    @classmethod
    def _check_address(cls, v: Optional[str]) -> Optional[str]:
        if v and not validate_subnet(v):
            raise ValueError(f"Invalid shim address. {SUBNET_MESSAGE}")
        return v or None


class VlanNetworkConfig(BaseModel):
    """Everything decided before any system change is made."""

    parent_interface: str
    vlan_id: int
    subnet: str
    gateway: str
    network_name: str
    ip_range: Optional[str] = None
    shim: Optional[ShimConfig] = None

    @field_validator("parent_interface")
    @classmethod
    def _check_parent(cls, v: str) -> str:
        if not validate_not_empty(v):
            raise ValueError("Interface name cannot be empty")
        return v.strip()

    @field_validator("vlan_id")
    @classmethod
    def _check_vlan_id(cls, v: int) -> int:
        if not VLAN_ID_MIN <= v <= VLAN_ID_MAX:
            raise ValueError(f"VLAN ID must be a number between {VLAN_ID_MIN} and {VLAN_ID_MAX}")
        return v

    @field_validator("subnet")
    @classmethod
    def _check_subnet(cls, v: str) -> str:
        if not validate_subnet(v):
            raise ValueError(SUBNET_MESSAGE)
        return v

    @field_validator("gateway")
    @classmethod
    def _check_gateway(cls, v: str) -> str:
        if not validate_ip(v):
            raise ValueError(IP_MESSAGE)
        return v

    @field_validator("network_name")
    @classmethod
    def _check_network_name(cls, v: str) -> str:
        if not validate_network_name(v):
            raise ValueError(NETWORK_NAME_MESSAGE)
        return v

    @field_validator("ip_range")
    @classmethod
    def _check_ip_range(cls, v: Optional[str]) -> Optional[str]:
        if v and not validate_subnet(v):
            raise ValueError(f"Invalid IP range. {SUBNET_MESSAGE}")
        return v or None

    @property
    def vlan_interface(self) -> str:
        return f"{self.parent_interface}.{self.vlan_id}"

    @property
    def connection_name(self) -> str:
        return f"vlan{self.vlan_id}"

    @property
    def shim_name(self) -> str:
        return f"macvlan{self.vlan_id}-shim"

    @property
    def shim_parent(self) -> str:
        if self.shim is None:
            return ""
        return self.shim.parent or self.vlan_interface

    def summary_rows(self) -> list[list[str]]:
        rows = [
            ["Parent Interface", self.parent_interface],
            ["VLAN ID", str(self.vlan_id)],
            ["VLAN Interface", self.vlan_interface],
            ["Connection Name", self.connection_name],
            ["Subnet", self.subnet],
            ["Gateway", self.gateway],
            ["IP Range", self.ip_range or "(full subnet)"],
            ["Docker Network", self.network_name],
        ]
        if self.shim is not None:
            rows.append(["Shim Interface", f"{self.shim_name} (on {self.shim_parent})"])
            rows.append(["Shim Address", self.shim.address or "(none)"])
        else:
            rows.append(["Shim Interface", "(none)"])
        return rows
