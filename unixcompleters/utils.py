"""Native utilities known to ship bash completions."""

__all__ = ["NATIVE_UTIL_NAMES"]

NATIVE_UTIL_NAMES = frozenset(
    {
        "apt",
        "apt-get",
        "awk",
        "base64",
        "basename",
        "bzip2",
        "cat",
        "chgrp",
        "chmod",
        "chown",
        "cksum",
        "cp",
        "crontab",
        "curl",
        "cut",
        "date",
        "dd",
        "df",
        "diff",
        "dig",
        "dirname",
        "dmesg",
        "du",
        "env",
        "expand",
        "file",
        "find",
        "fold",
        "free",
        "git",
        "grep",
        "groups",
        "gzip",
        "head",
        "hostname",
        "id",
        "ip",
        "journalctl",
        "kill",
        "killall",
        "less",
        "ln",
        "ls",
        "lsblk",
        "make",
        "man",
        "md5sum",
        "mkdir",
        "mount",
        "mv",
        "nl",
        "nohup",
        "od",
        "passwd",
        "paste",
        "ping",
        "pkill",
        "ps",
        "pwd",
        "readlink",
        "rm",
        "rmdir",
        "rsync",
        "scp",
        "sed",
        "seq",
        "sha1sum",
        "sha256sum",
        "sort",
        "split",
        "ssh",
        "stat",
        "sudo",
        "systemctl",
        "tac",
        "tail",
        "tar",
        "tee",
        "touch",
        "tr",
        "umount",
        "uname",
        "uniq",
        "unzip",
        "useradd",
        "wc",
        "wget",
        "who",
        "whoami",
        "xargs",
        "xz",
        "zip",
    }
)
