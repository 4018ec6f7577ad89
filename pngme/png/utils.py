def iter_chunks_by_name(chunks, name):
    for idx, chunk in enumerate(chunks):
        if str(chunk.tag) == name:
            yield idx, chunk


def index_of_chunk(chunks, name):
    '''Position of the first chunk with the given type, None if there is none.'''
    for idx, _ in iter_chunks_by_name(chunks, name):
        return idx

    return None


def get_chunk_by_name(chunks, name):
    '''First chunk with the given type, None if there is none.'''
    idx = index_of_chunk(chunks, name)

    return chunks[idx] if idx is not None else None


def get_chunks_by_name(chunks, name):
    return [chunk for _, chunk in iter_chunks_by_name(chunks, name)]
