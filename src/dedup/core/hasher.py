"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing utilities using FileRecord and pluggable hash algorithms.

HasherImpl computes the partial digest (first PARTIAL_HASH_SIZE bytes) and the
full digest of a file with bounded buffered reads, caching results per path so
that no file is read twice for the same stage.
"""

import hashlib
from typing import Dict

import xxhash

from dedup.core.models import FileRecord, FileHashes, HashAlgorithmName
from dedup.core.interfaces import Hasher, HashAlgorithm, HashState


class DeduplicationConfig:
    PARTIAL_HASH_SIZE = 64 * 1024  # Bytes hashed by the partial-hash stage
    READ_BUFFER_SIZE = 64 * 1024


# Use the same way to implement and use any other hashing algorithm
class Sha256AlgorithmImpl(HashAlgorithm):
    name = "sha256"

    @staticmethod
    def new() -> HashState:
        return hashlib.sha256()


class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxhash"

    @staticmethod
    def new() -> HashState:
        return xxhash.xxh64()


ALGORITHMS = {
    HashAlgorithmName.SHA256: Sha256AlgorithmImpl,
    HashAlgorithmName.XXHASH: XXHashAlgorithmImpl,
}


def get_algorithm(name: HashAlgorithmName) -> HashAlgorithm:
    return ALGORITHMS[name]()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes and caches digests per path. OSError from reading is left to the caller.
    """

    def __init__(self, algorithm: HashAlgorithm = None, buffer_size: int = DeduplicationConfig.READ_BUFFER_SIZE):
        self.algorithm = algorithm or Sha256AlgorithmImpl()
        self.buffer_size = buffer_size
        self.cache: Dict[str, FileHashes] = {}

    def hashes_for(self, file: FileRecord) -> FileHashes:
        return self.cache.setdefault(file.path, FileHashes())

    def compute_partial_hash(self, file: FileRecord) -> bytes:
        """Computes and caches the hash of the first PARTIAL_HASH_SIZE bytes of a file."""
        hashes = self.hashes_for(file)
        if hashes.partial is not None:
            return hashes.partial
        result = self._hash_stream(file.path, limit=DeduplicationConfig.PARTIAL_HASH_SIZE)
        hashes.partial = result
        return result

    def compute_full_hash(self, file: FileRecord) -> bytes:
        """Computes and caches the hash of the whole file content."""
        hashes = self.hashes_for(file)
        if hashes.full is not None:
            return hashes.full
        result = self._hash_stream(file.path)
        hashes.full = result
        return result

    def _hash_stream(self, path: str, limit: int = None) -> bytes:
        """Hashes at most `limit` bytes (everything when None) using bounded reads."""
        state = self.algorithm.new()
        remaining = limit
        with open(path, 'rb') as f:
            while remaining is None or remaining > 0:
                to_read = self.buffer_size if remaining is None else min(self.buffer_size, remaining)
                chunk = f.read(to_read)
                if not chunk:
                    break
                state.update(chunk)
                if remaining is not None:
                    remaining -= len(chunk)
        return state.digest()
