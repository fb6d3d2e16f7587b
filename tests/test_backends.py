"""Tests for the command-line backends in fedorasetup/backends."""

import json

from fedorasetup.backends import (
    DnfPackageManager,
    DockerEngine,
    IpRouteLinkConfigurator,
    NmcliClient,
    SystemdServiceManager,
    macvlan_network_args,
)


class TestDnf:
    """Tests for DnfPackageManager."""

    def test_install(self, mock_runner):
        """Packages are installed non-interactively with privileges."""
        DnfPackageManager(mock_runner).install(["docker-ce", "containerd.io"])
        mock_runner.run.assert_called_once_with(["dnf", "install", "-y", "docker-ce", "containerd.io"], privileged=True)

    def test_add_repo(self, mock_runner):
        """Repositories use the dnf5 addrepo syntax."""
        DnfPackageManager(mock_runner).add_repo("https://example.org/x.repo")
        mock_runner.run.assert_called_once_with(
            ["dnf", "config-manager", "addrepo", "--from-repofile=https://example.org/x.repo"], privileged=True
        )

    def test_makecache(self, mock_runner):
        """makecache refreshes metadata."""
        DnfPackageManager(mock_runner).makecache()
        mock_runner.run.assert_called_once_with(["dnf", "makecache"], privileged=True)


class TestSystemd:
    """Tests for SystemdServiceManager."""

    def test_enable_now(self, mock_runner):
        """enable(now=True) starts the unit too."""
        SystemdServiceManager(mock_runner).enable("docker", now=True)
        mock_runner.run.assert_called_once_with(["systemctl", "enable", "--now", "docker"], privileged=True)

    def test_enable(self, mock_runner):
        """enable() alone does not start the unit."""
        SystemdServiceManager(mock_runner).enable("macvlan11-shim.service")
        mock_runner.run.assert_called_once_with(["systemctl", "enable", "macvlan11-shim.service"], privileged=True)


class TestNmcli:
    """Tests for NmcliClient."""

    def test_connection_exists(self, mock_runner):
        """Existence is the exit code of nmcli connection show."""
        assert NmcliClient(mock_runner).connection_exists("vlan11") is True
        mock_runner.run.assert_called_once_with(["nmcli", "connection", "show", "vlan11"])

    def test_add_vlan_connection(self, mock_runner):
        """VLAN profiles have IP disabled and autoconnect on."""
        NmcliClient(mock_runner).add_vlan_connection("vlan11", ifname="eno1.11", parent="eno1", vlan_id=11)

        args = mock_runner.run.call_args.args[0]
        assert args[:5] == ["nmcli", "connection", "add", "type", "vlan"]
        assert args[args.index("con-name") + 1] == "vlan11"
        assert args[args.index("ifname") + 1] == "eno1.11"
        assert args[args.index("dev") + 1] == "eno1"
        assert args[args.index("id") + 1] == "11"
        assert args[args.index("ipv4.method") + 1] == "disabled"
        assert args[args.index("ipv6.method") + 1] == "disabled"
        assert args[args.index("connection.autoconnect") + 1] == "yes"
        assert mock_runner.run.call_args.kwargs["privileged"] is True

    def test_up_and_delete(self, mock_runner):
        """up and delete are privileged."""
        nm = NmcliClient(mock_runner)
        nm.up("vlan11")
        nm.delete_connection("vlan11")
        calls = [c.args[0] for c in mock_runner.run.call_args_list]
        assert calls == [["nmcli", "connection", "up", "vlan11"], ["nmcli", "connection", "delete", "vlan11"]]

    def test_connection_summary_filters(self, mock_runner, ok):
        """Only connection.* and GENERAL.* lines are kept."""
        mock_runner.run.return_value = ok(
            "connection.id:                vlan11\n"
            "connection.type:              vlan\n"
            "ipv4.method:                  disabled\n"
            "GENERAL.STATE:                activated\n"
        )
        lines = NmcliClient(mock_runner).connection_summary("vlan11")
        assert len(lines) == 3
        assert lines[-1].startswith("GENERAL.STATE")

    def test_connection_summary_missing(self, mock_runner, failed):
        """A missing connection has no summary."""
        mock_runner.run.return_value = failed(10)
        assert NmcliClient(mock_runner).connection_summary("vlan11") == []


class TestIpRoute:
    """Tests for IpRouteLinkConfigurator."""

    def test_list_interfaces(self, mock_runner, ok):
        """Loopback is skipped and @parent suffixes stripped."""
        mock_runner.run.return_value = ok(
            "lo               UNKNOWN        00:00:00:00:00:00 <LOOPBACK,UP,LOWER_UP>\n"
            "eno1             UP             aa:bb:cc:dd:ee:ff <BROADCAST,MULTICAST,UP,LOWER_UP>\n"
            "eno1.11@eno1     UP             aa:bb:cc:dd:ee:ff <BROADCAST,MULTICAST,UP,LOWER_UP>\n"
            "\n"
        )
        assert IpRouteLinkConfigurator(mock_runner).list_interfaces() == ["eno1", "eno1.11"]

    def test_state(self, mock_runner, ok):
        """State is the second column of the brief listing."""
        mock_runner.run.return_value = ok("eno1.11@eno1     DOWN   aa:bb:cc:dd:ee:ff <BROADCAST>\n")
        assert IpRouteLinkConfigurator(mock_runner).state("eno1.11") == "DOWN"

    def test_state_missing(self, mock_runner, failed):
        """A missing interface has no state."""
        mock_runner.run.return_value = failed()
        assert IpRouteLinkConfigurator(mock_runner).state("eno1.11") is None

    def test_add_macvlan(self, mock_runner):
        """Shims are macvlan links in bridge mode."""
        IpRouteLinkConfigurator(mock_runner).add_macvlan("macvlan11-shim", "eno1.11")
        mock_runner.run.assert_called_once_with(
            ["ip", "link", "add", "macvlan11-shim", "link", "eno1.11", "type", "macvlan", "mode", "bridge"],
            privileged=True,
        )

    def test_address_and_route(self, mock_runner):
        """Addresses and routes are added with privileges."""
        link = IpRouteLinkConfigurator(mock_runner)
        link.add_address("macvlan11-shim", "10.32.11.250/32")
        link.add_route("10.32.11.0/24", "macvlan11-shim")
        calls = [c.args[0] for c in mock_runner.run.call_args_list]
        assert calls == [
            ["ip", "addr", "add", "10.32.11.250/32", "dev", "macvlan11-shim"],
            ["ip", "route", "add", "10.32.11.0/24", "dev", "macvlan11-shim"],
        ]

    def test_has_route(self, mock_runner, ok):
        """A route exists only when ip route show prints something."""
        link = IpRouteLinkConfigurator(mock_runner)
        mock_runner.run.return_value = ok("10.32.11.0/24 scope link\n")
        assert link.has_route("10.32.11.0/24", "macvlan11-shim") is True
        mock_runner.run.return_value = ok("")
        assert link.has_route("10.32.11.0/24", "macvlan11-shim") is False


NETWORK_INSPECT = [
    {
        "Name": "service-vlan",
        "Driver": "macvlan",
        "IPAM": {"Config": [{"Subnet": "10.32.11.0/24", "Gateway": "10.32.11.1", "IPRange": "10.32.11.128/25"}]},
        "Options": {"parent": "eno1.11"},
        "Containers": {"abc": {"Name": "web"}, "def": {"Name": "db"}},
    }
]


class TestDocker:
    """Tests for DockerEngine and macvlan_network_args."""

    def test_macvlan_args(self):
        """The network create argv carries subnet, gateway and parent."""
        assert macvlan_network_args("service-vlan", "10.32.11.0/24", "10.32.11.1", "eno1.11") == [
            "docker",
            "network",
            "create",
            "-d",
            "macvlan",
            "--subnet=10.32.11.0/24",
            "--gateway=10.32.11.1",
            "-o",
            "parent=eno1.11",
            "service-vlan",
        ]

    def test_macvlan_args_ip_range(self):
        """The optional IP range is passed through."""
        args = macvlan_network_args("n", "10.32.11.0/24", "10.32.11.1", "eno1.11", ip_range="10.32.11.128/25")
        assert "--ip-range=10.32.11.128/25" in args

    def test_create_network_uncaptured(self, mock_runner):
        """capture=False lets docker print to the terminal."""
        DockerEngine(mock_runner).create_macvlan_network("n", "10.32.11.0/24", "10.32.11.1", "eno1.11", capture=False)
        assert mock_runner.run.call_args.kwargs == {"privileged": True, "capture": False}

    def test_inspect_network(self, mock_runner, ok):
        """Inspect output is parsed into DockerNetworkInfo."""
        mock_runner.run.return_value = ok(json.dumps(NETWORK_INSPECT))
        info = DockerEngine(mock_runner).inspect_network("service-vlan")

        assert info.driver == "macvlan"
        assert info.parent == "eno1.11"
        assert info.subnet == "10.32.11.0/24"
        assert info.gateway == "10.32.11.1"
        assert info.ip_range == "10.32.11.128/25"
        assert info.containers == ["db", "web"]

    def test_inspect_missing_network(self, mock_runner, failed):
        """A missing network inspects to None."""
        mock_runner.run.return_value = failed()
        assert DockerEngine(mock_runner).inspect_network("nope") is None

    def test_inspect_garbage(self, mock_runner, ok):
        """Unparseable output yields a bare info object."""
        mock_runner.run.return_value = ok("not json")
        info = DockerEngine(mock_runner).inspect_network("service-vlan")
        assert info.name == "service-vlan"
        assert info.subnet == ""

    def test_run_container(self, mock_runner):
        """run_container builds the full docker run argv."""
        DockerEngine(mock_runner).run_container(
            "portainer/portainer-ce:latest",
            "portainer",
            restart="always",
            ports=["8000:8000", "9443:9443"],
            volumes=["portainer_data:/data"],
        )
        mock_runner.run.assert_called_once_with(
            [
                "docker",
                "run",
                "-d",
                "--name",
                "portainer",
                "--restart=always",
                "-p",
                "8000:8000",
                "-p",
                "9443:9443",
                "-v",
                "portainer_data:/data",
                "portainer/portainer-ce:latest",
            ],
            privileged=True,
            capture=True,
        )

    def test_run_test_container(self, mock_runner):
        """Throwaway containers use --rm, a network and a command."""
        DockerEngine(mock_runner).run_container(
            "alpine:latest", "macvlan-test-1", remove=True, network="service-vlan", command=["sleep", "30"]
        )
        args = mock_runner.run.call_args.args[0]
        assert args[:4] == ["docker", "run", "-d", "--rm"]
        assert args[-3:] == ["alpine:latest", "sleep", "30"]
        assert "--network" in args

    def test_container_ip(self, mock_runner, ok):
        """container_ip returns the stripped address list."""
        mock_runner.run.return_value = ok("10.32.11.130 \n")
        assert DockerEngine(mock_runner).container_ip("macvlan-test-1") == "10.32.11.130"

    def test_container_ip_failure(self, mock_runner, failed):
        """A failed inspect yields an empty string."""
        mock_runner.run.return_value = failed()
        assert DockerEngine(mock_runner).container_ip("gone") == ""
