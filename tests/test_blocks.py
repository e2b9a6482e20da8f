from examprep.ingest import DELIMITER, join_canonical, split_blocks


def test_delimiter_is_fifty_hyphens():
    assert DELIMITER == "-" * 50


def test_split_blocks_trims_and_drops_empty_segments():
    text = f"\n  first  \n{DELIMITER}\n\n{DELIMITER}\nsecond\n{DELIMITER}\n   "

    assert split_blocks(text) == ["first", "second"]


def test_split_blocks_without_delimiter_returns_whole_text():
    assert split_blocks("  only block \n") == ["only block"]


def test_split_blocks_of_blank_text_is_empty():
    assert split_blocks("") == []
    assert split_blocks(f"{DELIMITER}{DELIMITER}") == []


def test_shorter_hyphen_runs_are_not_delimiters():
    text = "A " + "-" * 49 + " B"

    assert split_blocks(text) == [text]


def test_join_canonical_skips_empty_parts():
    joined = join_canonical(["one", "", "two"])

    assert joined == f"one\n{DELIMITER}\ntwo"
    assert split_blocks(joined) == ["one", "two"]
