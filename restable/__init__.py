"""
# Restable: binary chunks of compiled resource tables.

A binary format is described declaratively: a Chunk subclass lists its fields
as class attributes, in the order they appear on the wire, and each field knows
how to read and write itself.

Two basic main operations are defined for a chunk and its fields:

 1. unpack(): read the binary data from a Stream and build a high-level
    representation of it. The offsets of the fields are relative to the
    position of the stream when the unpacking of the chunk starts (its origin).
    Variable-length fields are views of the stream's buffer, nothing is copied.

 2. pack(): encode the high-level representation into binary data.

The sizes and offsets of variable-length fields can depend on other fields of
the same chunk via Dependency().

The format implemented on top of this is in restable.resources.
"""
