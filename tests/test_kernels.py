# -*- coding: utf-8 -*-
"""Tests for old kernel selection."""

import pytest

from conftest import FakeHost, kernel_set
from hostsweep.errors import KernelVersionUnknown
from hostsweep.models import InstalledPackage, KernelPackage
from hostsweep.system.kernels import (
    classify_package,
    find_old_kernels,
    kernel_packages,
    purge_command,
    select_removable,
    token_stem,
    version_stem,
)

RUNNING = "5.4.0-100-generic"


def select(installed, running=RUNNING):
    return select_removable(kernel_packages(installed, running), running)


class TestVersionStem:
    @pytest.mark.parametrize("version,stem", [
        ("5.4.0-100-generic", "5.4.0-100"),
        ("6.8.0-1015-azure", "6.8.0-1015"),
        ("5.15.0-1034-aws", "5.15.0-1034"),
        ("6.8.0-40-lowlatency", "6.8.0-40"),
        ("6.8.0-40-generic-64k", "6.8.0-40"),
        ("5.15.0-1034-nvidia", "5.15.0-1034"),
        ("5.4.0-100", "5.4.0-100"),
    ])
    def test_strips_flavor(self, version, stem):
        assert version_stem(version) == stem

    @pytest.mark.parametrize("token,stem", [
        ("5.4.0-100-generic", "5.4.0-100"),
        ("unsigned-5.4.0-80-generic", "5.4.0-80"),
        ("nvidia-535-5.4.0-80-generic", "5.4.0-80"),
        ("extra-4.4.0-21-generic", "4.4.0-21"),
        ("generic", None),
        ("generic-hwe-22.04", None),
    ])
    def test_token_stem(self, token, stem):
        assert token_stem(token) == stem

    def test_classify_prefers_modules_extra(self):
        assert classify_package("linux-modules-extra-5.4.0-90-generic") == ("modules_extra", "5.4.0-90-generic")
        assert classify_package("linux-modules-5.4.0-90-generic") == ("modules", "5.4.0-90-generic")
        assert classify_package("linux-headers-5.4.0-90") == ("headers", "5.4.0-90")
        assert classify_package("linux-image-generic") == ("image", "generic")
        assert classify_package("linux-firmware") is None


class TestSelection:
    def test_keeps_running_and_newest_fallback(self):
        sel = select(kernel_set("5.4.0-100", "5.4.0-90", "5.4.0-80"))
        assert sel.removable_versions == ("5.4.0-80",)
        assert sel.retained_versions == ("5.4.0-90",)
        assert set(sel.packages) == {
            "linux-image-5.4.0-80-generic",
            "linux-headers-5.4.0-80",
            "linux-headers-5.4.0-80-generic",
            "linux-modules-5.4.0-80-generic",
            "linux-modules-extra-5.4.0-80-generic",
        }
        assert "linux-image-5.4.0-100-generic" in sel.kept_packages
        assert "linux-image-5.4.0-90-generic" in sel.kept_packages

    def test_only_running_kernel(self):
        sel = select(kernel_set("5.4.0-100"))
        assert sel.empty
        assert sel.removable_versions == ()

    def test_single_other_kernel_is_kept(self):
        sel = select(kernel_set("5.4.0-100", "5.4.0-90"))
        assert sel.empty
        assert sel.retained_versions == ("5.4.0-90",)

    @pytest.mark.parametrize("n_others", [1, 2, 3, 5, 8])
    def test_removes_all_but_newest_other(self, n_others):
        others = [f"5.4.0-{i}" for i in range(10, 10 + n_others)]
        sel = select(kernel_set("5.4.0-100", *others))
        assert len(sel.removable_versions) == max(0, n_others - 1)
        assert sel.retained_versions == (others[-1],)

    def test_running_kernel_never_removed_even_when_oldest(self):
        running = "5.4.0-10-generic"
        sel = select(kernel_set("5.4.0-10", "5.4.0-90", "5.4.0-100", "5.4.0-110"), running)
        assert sel.removable_versions == ("5.4.0-90", "5.4.0-100")
        assert not any("5.4.0-10-" in name or name.endswith("5.4.0-10") for name in sel.packages)

    def test_version_sort_is_numeric(self):
        sel = select(kernel_set("5.4.0-100", "5.15.0-1", "5.4.0-200", "5.4.0-99"))
        # 5.15.0-1 is the newest non-running version
        assert sel.retained_versions == ("5.15.0-1",)
        assert sel.removable_versions == ("5.4.0-99", "5.4.0-200")

    def test_meta_packages_are_kept(self):
        installed = kernel_set("5.4.0-100", "5.4.0-90", "5.4.0-80") + [
            InstalledPackage("linux-image-generic", "5.4.0.100.1"),
            InstalledPackage("linux-headers-generic", "5.4.0.100.1"),
        ]
        sel = select(installed)
        assert "linux-image-generic" not in sel.packages
        assert "linux-headers-generic" in sel.kept_packages

    def test_cloud_flavor(self):
        installed = kernel_set("6.8.0-1015", "6.8.0-1010", "6.8.0-1009", flavor="aws")
        sel = select(installed, "6.8.0-1015-aws")
        assert sel.removable_versions == ("6.8.0-1009",)
        assert "linux-headers-6.8.0-1015" not in sel.packages

    def test_idempotent_after_purge(self):
        host = FakeHost(installed=kernel_set("5.4.0-100", "5.4.0-90", "5.4.0-80", "5.4.0-70"))
        first = find_old_kernels(host)
        assert first.removable_versions == ("5.4.0-70", "5.4.0-80")
        host.execute(purge_command(first))
        second = find_old_kernels(host)
        assert second.empty

    def test_running_kernel_without_package_removes_nothing(self):
        sel = select(kernel_set("5.4.0-90", "5.4.0-80", "5.4.0-70"))
        assert sel.empty

    def test_unknown_running_version_fails_closed(self):
        pkgs = [KernelPackage("linux-image-5.4.0-80-generic", "image", "5.4.0-80-generic")]
        with pytest.raises(KernelVersionUnknown):
            select_removable(pkgs, "")

    def test_find_old_kernels_unknown_uname(self):
        host = FakeHost(kernel="", installed=kernel_set("5.4.0-90", "5.4.0-80"))
        with pytest.raises(KernelVersionUnknown):
            find_old_kernels(host)

    def test_variant_packages_follow_their_release(self):
        installed = kernel_set("5.4.0-100", "5.4.0-90", "5.4.0-80") + [
            InstalledPackage("linux-image-unsigned-5.4.0-80-generic", "5.4.0-80.1"),
            InstalledPackage("linux-modules-nvidia-535-5.4.0-80-generic", "5.4.0-80.1"),
            InstalledPackage("linux-image-unsigned-5.4.0-100-generic", "5.4.0-100.1"),
        ]
        sel = select(installed)
        assert sel.removable_versions == ("5.4.0-80",)
        assert "linux-image-unsigned-5.4.0-80-generic" in sel.packages
        assert "linux-modules-nvidia-535-5.4.0-80-generic" in sel.packages
        assert "linux-image-unsigned-5.4.0-80-generic" not in sel.kept_packages
        assert "linux-image-unsigned-5.4.0-100-generic" in sel.kept_packages

    def test_running_flag_drives_selection(self):
        pkgs = [KernelPackage(f"linux-image-{v}-generic", "image", f"{v}-generic")
                for v in ("5.4.0-100", "5.4.0-90", "5.4.0-80")]
        sel = select_removable(pkgs, RUNNING)
        assert sel.empty
        assert "linux-image-5.4.0-100-generic" in sel.kept_packages

    def test_is_running_flag(self):
        pkgs = kernel_packages(kernel_set("5.4.0-100", "5.4.0-90"), RUNNING)
        running = {p.name for p in pkgs if p.is_running}
        assert "linux-image-5.4.0-100-generic" in running
        assert "linux-headers-5.4.0-100" in running
        assert not any("5.4.0-90" in name for name in running)


def test_purge_command_is_argv():
    sel = select(kernel_set("5.4.0-100", "5.4.0-90", "5.4.0-80"))
    cmd = purge_command(sel)
    assert cmd[:3] == ("apt-get", "purge", "-y")
    assert set(cmd[3:]) == set(sel.packages)
