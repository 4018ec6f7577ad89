"""
# pngme

Hide messages into PNG files: a message becomes the payload of a new chunk
of the file, it can be read back or removed by the type of the chunk.

The file format is described declaratively: a record (Chunk) is a sequence
of fields and two basic operations are defined for it and its sub components

 1. unpack(): read the binary data and build a high-level representation
    of that. Each field knows how many bytes it needs to read, possibly
    depending on the value of another field (see properties.Dependency).

 2. pack(): encode the high-level representation into binary data, after
    the derived values (lengths, checksums) have been updated and the
    offsets recalculated via relayout().

Any failure during unpacking is an exception derived from
exceptions.UnpackException and nothing is returned half-parsed.
"""
