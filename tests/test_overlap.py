from opportunity_matcher.overlap import distinct_count, overlap_labels, overlap_tags


def test_labels_compare_trimmed_and_case_insensitive():
    result = overlap_labels(["React", " typescript ", "Go"], ["react", "TypeScript", "Node.js"])

    assert result.members == ["React", " typescript "]
    assert result.count == 2


def test_labels_keep_source_order_and_report_each_once():
    result = overlap_labels(["SQL", "Python", "sql", "PYTHON"], ["python", "sql"])

    assert result.members == ["SQL", "Python"]


def test_blank_labels_never_match():
    result = overlap_labels(["", "  ", "React"], ["", "react"])

    assert result.members == ["React"]


def test_empty_inputs_give_empty_overlap():
    assert overlap_labels([], ["React"]).count == 0
    assert overlap_labels(["React"], []).count == 0
    assert overlap_tags([], []).members == []


def test_tags_use_exact_equality():
    result = overlap_tags([10, 8, 4], [8, 10, 17])

    assert result.members == [10, 8]
    assert result.count == 2


def test_distinct_count_uses_label_normalization():
    assert distinct_count(["React", "react ", "", "Node.js"]) == 2
