# Copyright (c) 2026 Mohamad Al-Zawahreh (dba Sovereign Systems).
#
# This file is part of setstr.
#
# LICENSE: DUAL-LICENSED (AGPLv3 or COMMERCIAL).

from typing import Callable, Dict, List, TextIO

from setstr.model import FieldMeta, ImportEntry, TypeMetadata

HEADER = """\
//
// GENERATED FILE -- DO NOT EDIT
//
// command: {command}
//{source}

package {package}

"""

SOURCE_LINE = """
// source: {file}
//"""

KEEP_IMPORTS = """
// guarantee imports
var _ = strconv.Atoi
var _ = errors.New
var _ = json.Marshal

"""

SETTER = """
// Set{field} sets {field}
func (s *{type}) Set{field}(v {field_type}) {{
	s.{field} = v
}}
"""

PTR_FUNC = """
// Ptr returns a pointer to a copy of {type}
func (s {type}) Ptr() interface{{}} {{
	return &s
}}
"""

SET_STRING_HEAD = """
// SetString sets the named element using the given string
func (s *{type}) SetString(name, value string) error {{
	var err error
	switch name {{
"""

SET_STRING_TAIL = """\
	default:
		err = errors.New("field does not exist:" + name)
	}
	return err
}
"""


# ─── Converters ─────────────────────────────────────────────────────────────
# Each converter returns the body of one `case` in SetString, unindented.


def _parse(var_type, call, cast=None):
    def convert(meta: FieldMeta) -> List[str]:
        value = "%s(v)" % cast if cast else "v"
        return [
            "var v %s" % var_type,
            "if v, err = %s; err == nil {" % call,
            "\ts.%s = %s" % (meta.field_name, value),
            "}",
        ]
    return convert


def _assign_string(meta: FieldMeta) -> List[str]:
    return ["s.%s = value" % meta.field_name]


def _decode(meta: FieldMeta) -> List[str]:
    if meta.field_type.startswith("*"):
        return [
            "if s.%s == nil {" % meta.field_name,
            "\ts.%s = new(%s)" % (meta.field_name, meta.field_type[1:]),
            "}",
            "err = json.Unmarshal([]byte(value), s.%s)" % meta.field_name,
        ]
    return ["err = json.Unmarshal([]byte(value), &s.%s)" % meta.field_name]


CONVERTERS: Dict[str, Callable[[FieldMeta], List[str]]] = {
    "int": _parse("int", "strconv.Atoi(value)"),
    "int32": _parse("int64", "strconv.ParseInt(value, 10, 32)", "int32"),
    "int64": _parse("int64", "strconv.ParseInt(value, 10, 64)"),
    "uint": _parse("uint64", "strconv.ParseUint(value, 10, 64)", "uint"),
    "uint32": _parse("uint64", "strconv.ParseUint(value, 10, 32)", "uint32"),
    "uint64": _parse("uint64", "strconv.ParseUint(value, 10, 64)"),
    "float32": _parse("float64", "strconv.ParseFloat(value, 32)", "float32"),
    "float64": _parse("float64", "strconv.ParseFloat(value, 64)"),
    "string": _assign_string,
}

DEFAULT_CONVERTER = _decode


def converter_for(field_type: str) -> Callable[[FieldMeta], List[str]]:
    return CONVERTERS.get(field_type, DEFAULT_CONVERTER)


# ─── Emitters ───────────────────────────────────────────────────────────────


def write_header(w: TextIO, package_name: str, imports: List[ImportEntry], command: str,
                 source: str = ""):
    source_line = SOURCE_LINE.format(file=source) if source else ""
    w.write(HEADER.format(command=command, source=source_line, package=package_name))
    if imports:
        w.write("import (\n")
        for imp in imports:
            w.write("\t")
            if imp.alias:
                w.write("%s " % imp.alias)
            w.write("%s\n" % imp.path)
        w.write(")\n")
    w.write(KEEP_IMPORTS)


def write_setter(w: TextIO, type_name: str, meta: FieldMeta):
    w.write(SETTER.format(type=type_name, field=meta.field_name, field_type=meta.field_type))


def write_ptr_func(w: TextIO, type_name: str):
    w.write(PTR_FUNC.format(type=type_name))


def write_set_string(w: TextIO, type_name: str, fields: List[FieldMeta]):
    w.write(SET_STRING_HEAD.format(type=type_name))
    for meta in fields:
        w.write('\tcase "%s": // (%s)\n' % (meta.tag_name, meta.field_type))
        for line in converter_for(meta.field_type)(meta):
            w.write("\t\t%s\n" % line)
    w.write(SET_STRING_TAIL)


def write_setters(w: TextIO, package_name: str, imports: List[ImportEntry],
                  metadata: TypeMetadata, command: str = "", source: str = ""):
    """
    Writes a complete generated Go file for ``metadata`` to ``w``.

    Types come out in table order. Within a type: one Set<Field> per field,
    Ptr() right after the first of them, then SetString. A non-empty
    ``source`` names the input file inside the banner.
    """
    write_header(w, package_name, imports, command, source)

    ptrs = set()
    for type_name, fields in metadata.items():
        for meta in fields:
            write_setter(w, type_name, meta)
            if type_name not in ptrs:
                write_ptr_func(w, type_name)
                ptrs.add(type_name)
        write_set_string(w, type_name, fields)
