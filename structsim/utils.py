def read_source_file(path):
    # undecodable bytes (e.g. comments in a legacy encoding) must not abort a comparison
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
