"""VLAN / Docker macvlan provisioning with an optional host shim."""

from fedorasetup.vlan.models import ShimConfig, VlanNetworkConfig
from fedorasetup.vlan.persistence import ShimPersistence
from fedorasetup.vlan.provisioner import VlanProvisioner
from fedorasetup.vlan.resources import DockerNetworkResource, ShimInterfaceResource, VlanConnectionResource
from fedorasetup.vlan.wizard import VlanConfigWizard

__all__ = [
    "VlanNetworkConfig",
    "ShimConfig",
    "ShimPersistence",
    "VlanProvisioner",
    "VlanConfigWizard",
    "VlanConnectionResource",
    "ShimInterfaceResource",
    "DockerNetworkResource",
]
