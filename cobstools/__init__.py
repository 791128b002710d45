'''Consistent Overhead Byte Stuffing codec and serial framing tools'''

__version__ = '1.0.0'
