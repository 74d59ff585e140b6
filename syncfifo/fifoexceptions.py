"""
Exceptions raised by syncfifo.
"""


class FifoError(Exception):
    """ Raised on bad configuration, bad stimulus or a failed comparison """
    pass


class FifoInternalError(Exception):
    """ Raised when the buffer state violates one of its invariants """
    pass
