"""
Set of classes and functions for expressing the "sort" of a module's wires.

An input is Free if no output of its module depends on it combinationally, and
Needed otherwise; an output is Giving if it depends on no input of its module
combinationally, and Dependent otherwise. A FIFO whose outputs are all Giving
has registered outputs: what a consumer sees in a tick never depends on what
the producer asserts in that same tick.
"""

from pyrtl import PyrtlError, PyrtlInternalError, Register

Verbose = False


def _verbose_print(s):
    if Verbose:
        print(s)


class InputSort(object):
    """ Base class for the sorts that can be assigned to module inputs """
    pass


class Free(InputSort):
    """ The wire sort for module inputs that are not combinationally connected
        to any its module's outputs """

    def __init__(self, ascription=True):
        self.needed_by_set = set()
        self.ascription = ascription

    def __str__(self):
        return "Free"


class Needed(InputSort):
    """ The wire sort for module inputs that *are* combinationally connected
        to one or more of its module's outputs.

        As an ascription, needed_by_set holds output names; once computed it
        holds the output wires themselves.
    """

    def __init__(self, needed_by_set, ascription=True):
        self.needed_by_set = needed_by_set
        self.ascription = ascription

    def __str__(self):
        wns = ", ".join(sorted(_wire_name(w) for w in self.needed_by_set))
        return "Needed (needed by: %s)" % wns


class OutputSort(object):
    """ Base class for the sorts that can be assigned to module outputs """
    pass


class Giving(OutputSort):
    """ A wire sort for module outputs that are not combinationally connected
        to any its module's inputs """

    def __init__(self, ascription=True):
        self.depends_on_set = set()
        self.ascription = ascription

    def __str__(self):
        return "Giving"


class Dependent(OutputSort):
    """ The wire sort for module outputs that *are* combinationally connected
        to one or more of its module's inputs """

    def __init__(self, depends_on_set, ascription=True):
        self.depends_on_set = depends_on_set
        self.ascription = ascription

    def __str__(self):
        wns = ", ".join(sorted(_wire_name(w) for w in self.depends_on_set))
        return "Dependent (depends on: %s)" % wns


def _wire_name(w):
    return w if isinstance(w, str) else w._original_name


def _sort_name(sort):
    return sort.__name__ if isinstance(sort, type) else str(sort)


def sanity_check_input_sort(sort, wirename):
    if (sort
            and (sort not in (Free, Needed))
            and (not isinstance(sort, (Free, Needed)))):
        raise PyrtlError(
            'Invalid sort ascription for input "%s" '
            '(must provide either Free or Needed type name or instance).'
            % wirename
        )


def sanity_check_output_sort(sort, wirename):
    if (sort
            and (sort not in (Giving, Dependent))
            and (not isinstance(sort, (Giving, Dependent)))):
        raise PyrtlError(
            'Invalid sort ascription for output "%s" '
            '(must provide either Giving or Dependent type name or instance).'
            % wirename
        )


def _build_intramodular_reachability_maps(module):
    """ Constructs the needed_by/depends_on maps limited to the module given.

        Walks backward from every output through the nets that drive it,
        stopping at the module's inputs. Registers and synchronous memory
        reads break the combinational chain.
    """
    from .module import _ModInput, _ModOutput

    # map from input to the outputs it affects, combinationally
    needed_by = {i: set() for i in module.inputs}
    # map from output to the inputs it depends on, combinationally
    depends_on = {o: set() for o in module.outputs}

    src_map, _ = module.block.net_connections()

    for output in module.outputs:
        _verbose_print("Output " + str(output))
        work_list = [output]
        seen = set()

        while work_list:
            a = work_list.pop()
            if a in seen:
                continue
            seen.add(a)
            _verbose_print("checking " + str(a))

            if isinstance(a, Register):
                continue
            if isinstance(a, _ModInput):
                if a.module is not module:
                    raise PyrtlInternalError(
                        'Input "%s" of another module reached from "%s".'
                        % (str(a), str(output)))
                needed_by[a].add(output)
                continue
            if a not in src_map:
                continue
            src_net = src_map[a]

            if src_net.op == 'm' and not src_net.op_param[1].asynchronous:
                continue
            if src_net.op == '@':
                raise PyrtlError("memwrites should not have a destination wire")

            work_list.extend(src_net.args)

    for input, outputs in needed_by.items():
        for output in outputs:
            assert isinstance(output, _ModOutput) and output.module is input.module
            depends_on[output].add(input)

    return needed_by, depends_on


def sort_matches(ascription, sort):
    # User can just supply classname (e.g. sort=Needed) without specifying _what_
    # the wire needs; that's fine, we just won't compare against the wires it needs.
    if isinstance(ascription, type):
        return isinstance(sort, ascription)

    # Otherwise user supplied an instance of the InputSort/OutputSort class:
    assert ascription.ascription
    if isinstance(ascription, Free) and isinstance(sort, Free):
        return True
    if isinstance(ascription, Giving) and isinstance(sort, Giving):
        return True
    if isinstance(ascription, Needed) and isinstance(sort, Needed):
        expected_names = set(ascription.needed_by_set)
        actual_names = set(w._original_name for w in sort.needed_by_set)
        return expected_names == actual_names
    if isinstance(ascription, Dependent) and isinstance(sort, Dependent):
        expected_names = set(ascription.depends_on_set)
        actual_names = set(w._original_name for w in sort.depends_on_set)
        return expected_names == actual_names

    return False


def annotate_module(module):
    _verbose_print("Annotating module %s with %d inputs and %d outputs."
                   % (module.name, len(module.inputs), len(module.outputs)))

    needed_by, depends_on = _build_intramodular_reachability_maps(module)

    for io in module.inputs | module.outputs:
        sort = _make_wire_sort(io, needed_by, depends_on)

        # If wire.sort was ascribed, check it and report if not matching.
        if io.sort and not sort_matches(io.sort, sort):
            raise PyrtlError(
                "Unmatched sort ascription on wire %s.\n"
                "User provided %s.\n"
                "But we computed %s."
                % (str(io), _sort_name(io.sort), str(sort)))
        io.sort = sort


def _make_wire_sort(wire, needed_by, depends_on):
    from .module import _ModInput, _ModOutput

    if isinstance(wire, _ModInput):
        nb_set = needed_by[wire]
        if nb_set:
            return Needed(nb_set, ascription=False)
        return Free(ascription=False)
    elif isinstance(wire, _ModOutput):
        do_set = depends_on[wire]
        if do_set:
            return Dependent(do_set, ascription=False)
        return Giving(ascription=False)
    raise PyrtlError("Only module inputs and outputs have wire sorts")
