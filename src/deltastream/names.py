""" Short wire codes for field names. A schema that asks to be minified
    has each of its field names replaced on the wire by the shortest
    lowercased prefix that is unique among that schema's fields.
"""

import collections


def allocate(names):
    """ Return a dictionary mapping each of the provided field *names* to its
        short code. The *names* are expected to be unique, and should be
        provided in a stable (sorted) order; the same input always produces
        the same codes, which is what keeps regenerated schemas compatible
        on the wire.

        Codes are grown one character at a time. At prefix length *l* the
        unresolved names are grouped by their lowercased prefix of length
        *l*; a group of one is resolved with that prefix as its code. A larger
        group moves on to the next round, unless every member of the group
        is already exhausted at this length, in which case each member falls
        back to its full lowercased name.
    """

    codes = dict()
    remaining = list(names)
    length = 1

    while remaining:
        groups = collections.OrderedDict()

        for name in remaining:
            prefix = name[:length].lower()
            groups.setdefault(prefix, []).append(name)

        carried = list()

        for prefix, members in groups.items():
            if len(members) == 1:
                codes[members[0]] = prefix
                continue

            exhausted = True
            for name in members:
                if len(name) > length:
                    exhausted = False
                    break

            if exhausted:
                # Names that differ only in case land here. The fallback can
                # still collide; see collisions().
                for name in members:
                    codes[name] = name.lower()
            else:
                carried.extend(members)

        remaining = carried
        length += 1

    return codes



def collisions(codes):
    """ Return a dictionary of any codes in the provided *codes* mapping
        (name to code) that were assigned to more than one name. The value
        for each colliding code is the sorted list of names sharing it. An
        empty dictionary is returned if the mapping is injective.
    """

    by_code = collections.defaultdict(list)

    for name, code in codes.items():
        by_code[code].append(name)

    found = dict()

    for code, names in by_code.items():
        if len(names) > 1:
            found[code] = sorted(names)

    return found


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
