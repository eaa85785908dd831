import zss

from structsim.tree import TOKEN, kind_name


def linearize(root):
    """
    Flatten a tree into its comparable sequence by preorder traversal:
    `<KIND>`, the label of TOKEN leaves, the children, then `</KIND>`.
    Nesting depth and sibling order can be recovered from the markers.
    """
    out = []
    if root is not None:
        _emit(root, out)
    return out


def _emit(node, out):
    name = kind_name(node.kind)
    out.append(f"<{name}>")
    if node.kind == TOKEN and node.label:
        out.append(node.label)
    for child in node.children:
        _emit(child, out)
    out.append(f"</{name}>")


# zss/zhang-shasha method
def _tree_to_zss(node):
    label = kind_name(node.kind)
    # leaves keep their token label so NUM and var_0 differ
    if node.kind == TOKEN and node.label:
        label += f":{node.label}"
    nd = zss.Node(label)
    for child in node.children:
        nd.addkid(_tree_to_zss(child))
    return nd


def _zss_tree_size(node):
    if node is None:
        return 0
    cnt = 1
    for c in getattr(node, "children", []):
        cnt += _zss_tree_size(c)
    return cnt


def tree_similarity_zhang_shasha(root_a, root_b):
    """
    Ordered tree edit distance (unit costs) between two structural trees.
    Returns (distance, similarity) with similarity = 1 - ted / (|A| + |B|).
    """
    if root_a is None and root_b is None:
        return 0, 1.0
    za = _tree_to_zss(root_a) if root_a is not None else None
    zb = _tree_to_zss(root_b) if root_b is not None else None

    def label_dist(a, b):
        return 0 if a == b else 1

    if za is None or zb is None:
        ted = _zss_tree_size(za) + _zss_tree_size(zb)
    else:
        ted = zss.simple_distance(za, zb, get_children=zss.Node.get_children,
                                  get_label=zss.Node.get_label, label_dist=label_dist)
    size_a = _zss_tree_size(za)
    size_b = _zss_tree_size(zb)
    denom = float(size_a + size_b) if (size_a + size_b) > 0 else 1.0
    sim = 1.0 - (ted / denom)
    return int(ted), max(0.0, min(1.0, sim))
