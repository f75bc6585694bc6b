"""Default classification rules.

Evaluated top to bottom; the first rule whose pattern occurs in the process
name wins.
"""

from __future__ import annotations

from .models import ClassificationRule, Severity

FALLBACK_RULE = ClassificationRule(
    name="fallback",
    pattern=".*",
    severity=Severity.LOW,
    explanation=(
        "General or unrecognized process error. Read the full message for context, "
        "check whether the process is still running and search its documentation "
        "or bug tracker for the exact error text."
    ),
)

_L = Severity.LOW
_M = Severity.MEDIUM
_H = Severity.HIGH

# (name, pattern, severity, explanation)
_DEFAULT_TABLE: tuple[tuple[str, str, Severity, str], ...] = (
    (
        "systemd",
        r"systemd",
        _M,
        "A systemd unit failed or misbehaved. Inspect it with "
        "'systemctl status <unit>' and 'journalctl -u <unit>'; fix the unit "
        "configuration or its dependencies, then restart it.",
    ),
    (
        "kernel",
        r"kernel",
        _H,
        "Kernel-level error, possibly hardware, driver or filesystem related. "
        "Review 'dmesg', check disks and memory, and make sure the running "
        "kernel and firmware are up to date.",
    ),
    (
        "bluetoothd",
        r"bluetoothd",
        _M,
        "Bluetooth daemon error. Restart the bluetooth service, re-pair the "
        "affected device and check that the adapter firmware is loaded.",
    ),
    (
        "pipewire",
        r"pipewire",
        _M,
        "Audio/video server error. Restart the user session services "
        "('systemctl --user restart pipewire pipewire-pulse') and check "
        "for conflicting PulseAudio installations.",
    ),
    (
        "fwupd",
        r"fwupd",
        _M,
        "Firmware update daemon error. Refresh metadata with 'fwupdmgr refresh' "
        "and retry; unsupported devices can usually be ignored.",
    ),
    (
        "touchegg",
        r"touchegg",
        _L,
        "Touchpad gesture daemon error. Usually harmless; restart touchegg or "
        "disable it if gestures are not used.",
    ),
    (
        "cinnamon-screensaver",
        r"cinnamon-screensaver",
        _L,
        "Cinnamon screensaver error. Typically cosmetic; log out and back in or "
        "update the desktop environment packages.",
    ),
    (
        "xorg",
        r"xorg",
        _M,
        "X server error. Check ~/.local/share/xorg/Xorg.0.log or "
        "/var/log/Xorg.0.log for driver problems and verify the graphics "
        "driver matches the running kernel.",
    ),
    (
        "gdm",
        r"gdm",
        _L,
        "GNOME display manager error. If logins work this is informational; "
        "otherwise inspect 'journalctl -u gdm' for greeter failures.",
    ),
    (
        "lightdm",
        r"lightdm",
        _L,
        "LightDM display manager error. Check /var/log/lightdm/ for greeter or "
        "session start failures.",
    ),
    (
        "NetworkManager",
        r"networkmanager",
        _M,
        "NetworkManager error. Check connection profiles with 'nmcli connection "
        "show', verify DHCP and DNS, and restart NetworkManager if links flap.",
    ),
    (
        "wpa_supplicant",
        r"wpa_supplicant",
        _M,
        "Wi-Fi authentication error. Verify the network credentials, the "
        "regulatory domain and the wireless driver or firmware.",
    ),
    (
        "dnsmasq",
        r"dnsmasq",
        _L,
        "dnsmasq DNS/DHCP error. Look for port conflicts with other resolvers "
        "and validate its configuration with 'dnsmasq --test'.",
    ),
    (
        "nginx",
        r"nginx",
        _M,
        "nginx web server error. Validate the configuration with 'nginx -t' and "
        "read /var/log/nginx/error.log for failing upstreams or permissions.",
    ),
    (
        "apache",
        r"apache|httpd",
        _M,
        "Apache web server error. Validate the configuration with "
        "'apachectl configtest' and read the Apache error log.",
    ),
    (
        "mysql",
        r"mysql|mariadb",
        _H,
        "MySQL/MariaDB database error. Check the database error log, free disk "
        "space and table integrity ('mysqlcheck'); data may be at risk.",
    ),
    (
        "postgres",
        r"postgres",
        _H,
        "PostgreSQL database error. Read the PostgreSQL server log, verify disk "
        "space and connection limits; data may be at risk.",
    ),
    (
        "fail2ban",
        r"fail2ban",
        _L,
        "fail2ban error. Check jail definitions and log paths with "
        "'fail2ban-client status'.",
    ),
    (
        "auditd",
        r"auditd",
        _M,
        "Audit daemon error. Audit records may be lost; check the audit log "
        "partition space and the rules loaded with 'auditctl -l'.",
    ),
    (
        "firewalld",
        r"firewalld",
        _L,
        "firewalld error. Review zones and rules with 'firewall-cmd --list-all' "
        "and reload the firewall.",
    ),
    (
        "docker",
        r"docker",
        _M,
        "Docker engine error. Inspect 'docker info' and the failing containers' "
        "logs; check storage driver and disk space.",
    ),
    (
        "containerd",
        r"containerd",
        _M,
        "containerd runtime error. Check the containerd service status and its "
        "snapshotter storage.",
    ),
    (
        "libvirtd",
        r"libvirtd",
        _M,
        "libvirt virtualization error. Check 'virsh list --all', the domain logs "
        "under /var/log/libvirt/ and host virtualization support.",
    ),
    (
        "cupsd",
        r"cupsd",
        _L,
        "CUPS printing error. Check printer queues with 'lpstat -t' and "
        "/var/log/cups/error_log.",
    ),
    (
        "udev",
        r"udev",
        _M,
        "udev device manager error. A device rule or driver failed; review "
        "'udevadm monitor' output and custom rules in /etc/udev/rules.d/.",
    ),
    (
        "apt",
        r"\bapt(?:itude|d)?\b",
        _L,
        "APT package manager error. Run 'apt update' and 'dpkg --configure -a' "
        "to recover from interrupted operations or broken sources.",
    ),
    (
        "dnf",
        r"dnf|yum",
        _L,
        "DNF/YUM package manager error. Clean metadata with 'dnf clean all' and "
        "check repository configuration.",
    ),
    (
        "zypper",
        r"zypper",
        _L,
        "Zypper package manager error. Refresh repositories with 'zypper "
        "refresh' and check for locks held by other package tools.",
    ),
    (
        "cron",
        r"cron",
        _L,
        "cron job error. Check the crontab entry, the job's environment and its "
        "exit status.",
    ),
    (
        "rsyslog",
        r"rsyslog",
        _L,
        "rsyslog error. Validate the configuration with 'rsyslogd -N1' and check "
        "permissions on the log destinations.",
    ),
    (
        "logrotate",
        r"logrotate",
        _L,
        "logrotate error. Run 'logrotate -d /etc/logrotate.conf' to find the "
        "failing stanza.",
    ),
    (
        "journalctl",
        r"journal",
        _L,
        "systemd journal error. Verify journal files with 'journalctl --verify' "
        "and check the journal size limits.",
    ),
)


def default_rules() -> tuple[ClassificationRule, ...]:
    """Build the default rule table."""
    return tuple(
        ClassificationRule(name=name, pattern=pattern, severity=sev, explanation=text)
        for name, pattern, sev, text in _DEFAULT_TABLE
    )
