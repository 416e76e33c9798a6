"""vcpkgcache — vcpkg tool cache for CI runners."""
