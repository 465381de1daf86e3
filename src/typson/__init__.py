"""
Minimal type-directed JSON codec
"""
from typson.codec import *
from typson.exceptions import *
from typson.numeric import *
from typson.options import *
from typson.patterns import *
from typson.schema import *
from typson.shapes import *
from typson.timestamps import *
