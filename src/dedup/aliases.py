from dedup.core.models import DedupAction, HashAlgorithmName

HASH_ALIASES = {
    "sha256": HashAlgorithmName.SHA256,
    "xxhash": HashAlgorithmName.XXHASH,
}

HASH_CHOICES = list(HASH_ALIASES.keys())

HASH_HELP_TEXT = (
    "Digest used for partial and full content comparison:\n"
    "  sha256     : SHA-256 (default)\n"
    "  xxhash     : xxHash64, faster, non-cryptographic\n"
)

ACTION_HELP_TEXT = {
    DedupAction.SYMLINK: "Replace duplicate files by relative symlinks to the kept file",
    DedupAction.REMOVE: "Remove duplicate files",
    DedupAction.TRASH: "Move duplicate files to the system trash",
}

EPILOG_TEXT = """
The first file found (in sorted traversal order, roots in the order given) is
kept; every other member of its duplicate group is reported or processed.

Examples:
  Report duplicates in two trees
  %(prog)s ~/Photos /mnt/backup/Photos

  Only consider files of 1 MiB or more, and show sizes
  %(prog)s -m 1M -v ~/Downloads

  Replace duplicates by symlinks, not looking deeper than two levels
  %(prog)s -d 2 --symlink ~/Music

  Move duplicates to the trash using xxHash
  %(prog)s --trash --hash xxhash ~/Documents
"""
