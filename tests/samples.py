"""Canned collector outputs shared by the tests."""

from __future__ import annotations

DF_OUTPUT = (
    "Filesystem      Size  Used Avail Capacity Mounted on\n"
    "/dev/sda1        50G   21G   27G      42% /\n"
    "/dev/sdb1       916G  870G   46G      95% /mnt/backup disk\n"
)

FREE_OUTPUT = (
    "               total        used        free      shared  buff/cache   available\n"
    "Mem:             16G          8G          8G        0.1G        2.0G         7.9G\n"
    "Swap:           2.0G          0B        2.0G\n"
)

TOP_OUTPUT = (
    "top - 10:51:23 up 3 days,  2:01,  1 user,  load average: 0.52, 0.58, 0.59\n"
    "Tasks: 212 total,   1 running, 211 sleeping,   0 stopped,   0 zombie\n"
)

SYSLOG_LINES = [
    "2024-12-06T10:51:23Z host1 systemd[1]: Failed to start foo.service",
    "2024-12-06T10:52:01Z host1 kernel: EXT4-fs error (device sda1): bad block",
    "2024-12-06T10:55:10Z host1 mysqld[1204]: [ERROR] InnoDB: Operating system error 28",
]


class FixtureCollector:
    """Collector returning canned artifacts and recording which steps ran."""

    def __init__(self, **overrides: object) -> None:
        self.calls: list[str] = []
        self.values: dict[str, object] = {
            "system_info": {"Hostname": "host1", "Kernel": "6.1.0"},
            "update_packages": "Reading package lists... Done\n0 upgraded",
            "disk_usage": DF_OUTPUT,
            "memory_usage": FREE_OUTPUT,
            "cpu_snapshot": TOP_OUTPUT,
            "error_log": "\n".join(SYSLOG_LINES),
            "smart_status": {"/dev/sda": "SMART overall-health self-assessment test result: PASSED"},
            "package_integrity": ("", []),
        }
        self.values.update(overrides)

    async def _get(self, name: str):
        self.calls.append(name)
        value = self.values[name]
        if isinstance(value, Exception):
            raise value
        return value

    async def system_info(self):
        return await self._get("system_info")

    async def update_packages(self):
        return await self._get("update_packages")

    async def disk_usage(self):
        return await self._get("disk_usage")

    async def memory_usage(self):
        return await self._get("memory_usage")

    async def cpu_snapshot(self):
        return await self._get("cpu_snapshot")

    async def error_log(self):
        return await self._get("error_log")

    async def smart_status(self):
        return await self._get("smart_status")

    async def package_integrity(self):
        return await self._get("package_integrity")
