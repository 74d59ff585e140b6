"""
Defines the Module class, an abstraction for encapsulating
PyRTL logic behind well-defined input/outputs.
"""

# pylint: disable=no-member
import itertools
import weakref

import pyrtl
from pyrtl import PyrtlError

from .wiresorts import annotate_module, sanity_check_input_sort, sanity_check_output_sort

_internal_prefix = "mod_"
_modIndexer = itertools.count()

# map from block to {module name: module}
_modules_by_block = weakref.WeakKeyDictionary()


def _reset_module_indexer():
    global _modIndexer
    _modIndexer = itertools.count()


def next_mod_name(name=""):
    if name == "":
        return _internal_prefix + str(next(_modIndexer))
    elif name.startswith(_internal_prefix):
        raise PyrtlError(
            'Starting a module name with "%s" is reserved for internal use.'
            % _internal_prefix
        )
    else:
        return name


def modules_by_name(block=None):
    """ The modules elaborated in a block, keyed by name """
    return _modules_by_block.setdefault(pyrtl.working_block(block), {})


class Module(object):
    """ The Module superclass. All user-defined modules must be a subclass
        of this class.
    """

    def __init__(self, name="", block=None):
        """ Create a module, which represents the encapsulation of logic
            behind strict input/output wires. The hardware to be elaborated
            must be defined by the concrete class via the 'definition' function.

            :param name: Name to give this module
            :param block: Block to which the module belongs
        """
        self.inputs = set()
        self.outputs = set()
        self.inputs_by_name = {}  # map from input.original_name to wire
        self.outputs_by_name = {}  # map from output.original_name to wire
        self._in_definition = False
        self.name = next_mod_name(name)
        self.block = pyrtl.working_block(block)
        self._add_to_block()
        self._definition()
        self.validity_check()
        annotate_module(self)

    def _add_to_block(self):
        modules = modules_by_name(self.block)
        if self.name in modules:
            raise PyrtlError('Module with name "%s" already exists.' % self.name)
        modules[self.name] = self

    def _definition(self):
        self._in_definition = True
        self.definition()
        self._in_definition = False

    def definition(self):
        """ Each module subclass needs to provide the code that should be
            elaborated when the module is instantiated. This is like the
            `main` method of the module.
        """
        raise PyrtlError('Module subclasses must supply a `definition` method')

    def Input(self, bitwidth, name, sort=None):
        if not self._in_definition:
            raise PyrtlError("Cannot create a module input outside of the module's definition")
        sanity_check_input_sort(sort, name)
        w = _ModInput(bitwidth, name, self, sort)
        self.inputs.add(w)
        self.inputs_by_name[w._original_name] = w
        return w

    def Output(self, bitwidth, name, sort=None):
        if not self._in_definition:
            raise PyrtlError("Cannot create a module output outside of the module's definition")
        sanity_check_output_sort(sort, name)
        w = _ModOutput(bitwidth, name, self, sort)
        self.outputs.add(w)
        self.outputs_by_name[w._original_name] = w
        return w

    def to_block_io(self):
        """ Sets this module's input/output wires as the current block's I/O """
        for w in self.inputs:
            w.to_block_input()
        for w in self.outputs:
            w.to_block_output()

    def validity_check(self):
        # At least one _ModOutput
        if not self.outputs:
            raise PyrtlError("Module must have at least one output.")

        # All _ModInput and _ModOutput names are unique (they are used as
        # attribute names on the module).
        io_names_list = sorted(io._original_name for io in self.inputs | self.outputs)
        io_names_set = set(io_names_list)
        if len(io_names_list) != len(io_names_set):
            for io in io_names_set:
                io_names_list.remove(io)
            raise PyrtlError('Duplicate names found for the following different module '
                             'input/output wires: %s' % repr(io_names_list))

        src_dict, dest_dict = self.block.net_connections()

        for wire in self.inputs:
            if wire not in dest_dict:
                raise PyrtlError('Invalid module. Input "%s" is not connected '
                                 'to any internal module logic.' % str(wire))

        for wire in self.outputs:
            if wire not in src_dict:
                raise PyrtlError('Invalid module. Output "%s" is not connected '
                                 'to any internal module logic.' % str(wire))

    def __str__(self):
        """ Print out the wire sorts for each input and output """
        s = "Module '%s'\n" % self.__class__.__name__
        s += "  Inputs:\n"
        for wire in sorted(self.inputs, key=lambda w: w._original_name):
            s += "    %s\n" % repr({wire._original_name: str(wire.sort)})
        s += "  Outputs:\n"
        for wire in sorted(self.outputs, key=lambda w: w._original_name):
            s += "    %s\n" % repr({wire._original_name: str(wire.sort)})
        return s

    def __getattr__(self, name):
        """ You can access a module's input/output wires like 'module.wire_original_name'. """
        if name in self.__dict__['inputs_by_name']:
            return self.__dict__['inputs_by_name'][name]
        elif name in self.__dict__['outputs_by_name']:
            return self.__dict__['outputs_by_name'][name]
        else:
            inputs = sorted(str(i) for i in self.inputs)
            outputs = sorted(str(o) for o in self.outputs)
            raise AttributeError(
                'Cannot get non-IO wirevector "%s" from module "%s".\n'
                'Make sure you spelled the wire name correctly and '
                'that you used "self.Input" and "self.Output" rather than '
                '"pyrtl.Input" and "pyrtl.Output" to declare the IO wirevectors.\n'
                'Available input wires are %s and output wires are %s.' %
                (name, self.name, str(inputs), str(outputs)))


class _ModIO(pyrtl.WireVector):
    """ The base class for module inputs/outputs """

    def __init__(self, bitwidth, name, module, sort=None):
        """ The original name is kept off the wire itself so that several
            instances of the same module don't clash in the block. Access
            these wires via module.wire_name instead.
        """
        if not name:
            raise PyrtlError("Must supply a non-empty name for a module's input/output wire")
        self._original_name = name
        self.sort = sort
        self.module = module
        super(_ModIO, self).__init__(bitwidth, block=module.block)

    def __str__(self):
        return "%s/%d%s[%s]" % (self._original_name, self.bitwidth, self._io_code,
                                self.module.name)


class _ModInput(_ModIO):
    """ A WireVector class for specifying input to a single module """

    _io_code = "I"

    def to_block_input(self, name=""):
        """ Drive this wire from a new block Input of the same name """
        name = name if name else self._original_name
        w = pyrtl.Input(len(self), name=name, block=self.module.block)
        self <<= w


class _ModOutput(_ModIO):
    """ A WireVector class for specifying output from a single module """

    _io_code = "O"

    def to_block_output(self, name=""):
        """ Drive a new block Output of the same name from this wire """
        name = name if name else self._original_name
        w = pyrtl.Output(len(self), name=name, block=self.module.block)
        w <<= self
