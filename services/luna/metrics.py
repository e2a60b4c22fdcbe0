"""Host status sampling: IP address, CPU load and RAM usage."""
import socket
import subprocess
from typing import NamedTuple

import psutil

NO_IP = "N/A"

CPU_CMD = "top -bn1 | grep 'Cpu(s)' | awk '{print int($2)}'"
RAM_CMD = "free | grep Mem | awk '{print int($3/$2 * 100)}'"

# Tailscale and carrier-grade NAT hand out 100.64.0.0/10
SKIP_PREFIXES = ("127.", "100.")


class Snapshot(NamedTuple):
    ip: str
    cpu_percent: int
    ram_percent: int


def parse_percent(text):
    """Turn command output into an int in [0, 100]; anything unparseable is 0."""
    try:
        value = int(float(text.strip()))
    except (AttributeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, value))


def get_ip_address():
    stats = psutil.net_if_stats()
    for name, addrs in psutil.net_if_addrs().items():
        iface = stats.get(name)
        if iface is None or not iface.isup:
            continue
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if addr.address.startswith(SKIP_PREFIXES):
                continue
            return addr.address
    return NO_IP


def get_cpu_usage():
    return parse_percent(subprocess.getoutput(CPU_CMD))


def get_ram_usage():
    return parse_percent(subprocess.getoutput(RAM_CMD))


def sample_snapshot():
    return Snapshot(get_ip_address(), get_cpu_usage(), get_ram_usage())
