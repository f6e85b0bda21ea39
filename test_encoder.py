import unittest

from diagnostics import AsmError
from encoder import (
    I_FORMAT, J_FORMAT, R_FORMAT, Resolved, Unresolved,
    decode_register, encode, parse_instruction, resolve, split_args, split_mem_operand,
)
from symtab import SymbolTable


def one(opname, args, address=0, lineno=1):
    nodes = parse_instruction(opname, split_args(args), address, lineno)
    assert nodes is not None and len(nodes) == 1
    return nodes[0]


def hex_of(opname, args, symtab=None):
    inst = one(opname, args)
    if symtab is not None:
        assert resolve(inst, symtab)
    return encode(inst)


class TestRegisters(unittest.TestCase):

    def test_zero(self):      self.assertEqual(decode_register('$0'), 0)
    def test_temp(self):      self.assertEqual(decode_register('$t3'), 11)
    def test_saved(self):     self.assertEqual(decode_register(' $s7 '), 23)

    def test_unknown_defaults_to_zero(self):
        with self.assertLogs('encoder', level='WARNING'):
            self.assertEqual(decode_register('$zero'), 0)

    def test_too_large_defaults_to_zero(self):
        with self.assertLogs('encoder', level='WARNING'):
            self.assertEqual(decode_register('$t30'), 0)


class TestOperandSplitting(unittest.TestCase):

    def test_commas_with_spaces(self):
        self.assertEqual(split_args('$t0, $s1,$s2'), ['$t0', '$s1', '$s2'])

    def test_empty(self):
        self.assertEqual(split_args('  '), [])

    def test_memory_operand(self):
        self.assertEqual(split_mem_operand('-8($s1)'), ('-8', '$s1'))
        self.assertEqual(split_mem_operand('($t0)'), ('0', '$t0'))
        self.assertEqual(split_mem_operand('12'), ('12', '$0'))


class TestRFormat(unittest.TestCase):

    def test_add_fields(self):
        inst = one('add', '$t0, $s1, $s2')
        self.assertEqual(inst.fmt, R_FORMAT)
        self.assertEqual(inst.rt, '01000')
        self.assertEqual(inst.rs1, '10001')
        self.assertEqual(inst.rs2, '10010')
        encode(inst)
        self.assertEqual(inst.bin_inst,
                         '100000' + '10001' + '10010' + '01000' + '00000' + '000000')

    def test_add_hex(self):
        self.assertEqual(hex_of('add', '$t0, $s1, $s2'), '82324000')

    def test_nor(self):
        self.assertEqual(hex_of('nor', '$s0, $s1, $s2'), '9E328000')

    def test_sll(self):
        self.assertEqual(hex_of('sll', '$t0, $t1, 4'), '01204100')

    def test_sll_shift_out_of_range(self):
        with self.assertRaises(AsmError):
            one('sll', '$t0, $t1, 32')


class TestIFormat(unittest.TestCase):

    def test_addi_negative(self):
        inst = one('addi', '$t1, $t0, -1')
        self.assertEqual(inst.fmt, I_FORMAT)
        self.assertEqual(inst.imm, Resolved('1' * 16))
        self.assertEqual(encode(inst), '2109FFFF')

    def test_ori(self):
        self.assertEqual(hex_of('ori', '$t0, $t0, 255'), '350800FF')

    def test_lui(self):
        self.assertEqual(hex_of('lui', '$t0, 1'), '3C080001')

    def test_lw(self):
        self.assertEqual(hex_of('lw', '$t0, 4($s0)'), '8E080004')

    def test_sw_negative_offset(self):
        self.assertEqual(hex_of('sw', '$t2, -8($s1)'), 'AE2AFFF8')

    def test_immediate_out_of_range_is_fatal(self):
        with self.assertRaises(AsmError) as ctx:
            parse_instruction('addi', ['$t0', '$t0', '70000'], 0, 12)
        self.assertEqual(ctx.exception.lineno, 12)

    def test_bne_deferred(self):
        inst = one('bne', '$t0, $t1, loop')
        self.assertEqual(inst.imm, Unresolved('loop'))
        self.assertFalse(inst.resolved)
        self.assertEqual(inst.target, 'loop')

    def test_bne_resolves_like_jump(self):
        symtab = SymbolTable()
        symtab.insert('loop', 2)
        self.assertEqual(hex_of('bne', '$t0, $t1, loop', symtab), '19280002')


class TestJFormat(unittest.TestCase):

    def test_jump(self):
        symtab = SymbolTable()
        symtab.insert('end', 3)
        inst = one('j', 'end')
        self.assertEqual(inst.fmt, J_FORMAT)
        self.assertTrue(resolve(inst, symtab))
        self.assertEqual(encode(inst), '08000003')

    def test_undefined_target(self):
        inst = one('j', 'nowhere')
        self.assertFalse(resolve(inst, SymbolTable()))
        self.assertIsNone(inst.bin_inst)

    def test_encode_unresolved_refused(self):
        with self.assertRaises(ValueError):
            encode(one('j', 'nowhere'))

    def test_highest_target(self):
        symtab = SymbolTable()
        symtab.insert('far', 32767)
        self.assertEqual(hex_of('j', 'far', symtab), '08007FFF')

    def test_target_past_signed_range_is_fatal(self):
        symtab = SymbolTable()
        symtab.insert('far', 32768)
        inst = one('j', 'far', lineno=9)
        with self.assertRaises(AsmError) as ctx:
            resolve(inst, symtab)
        self.assertEqual(ctx.exception.lineno, 9)


class TestLoadAddress(unittest.TestCase):

    def test_expands_to_two_nodes(self):
        nodes = parse_instruction('la', ['$t0', 'arr'], 4, 7, 'start',
                                  next_line='arr .word 305419896')
        self.assertEqual(len(nodes), 2)
        upper, lower = nodes
        self.assertEqual((upper.address, lower.address), (4, 5))
        self.assertEqual((upper.lineno, lower.lineno), (7, 7))
        self.assertEqual((upper.label, lower.label), ('start', 'start'))
        self.assertEqual(encode(upper), '3C081234')
        self.assertEqual(encode(lower), '35085678')

    def test_missing_lookahead_defaults_to_zero(self):
        upper, lower = parse_instruction('la', ['$t0', 'arr'], 0, 1, next_line=None)
        self.assertEqual(encode(upper), '3C080000')
        self.assertEqual(encode(lower), '35080000')


class TestIllegalOpcode(unittest.TestCase):

    def test_unknown(self):
        self.assertIsNone(parse_instruction('mul', ['$t0', '$t1', '$t2'], 0, 1))

    def test_case_sensitive(self):
        self.assertIsNone(parse_instruction('ADD', ['$t0', '$t1', '$t2'], 0, 1))


if __name__ == '__main__':
    unittest.main(verbosity=2)
