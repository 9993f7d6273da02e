"""Translate an XML Schema (XSD) into a definition."""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from icontract import ensure

from xmlexact.common import DefinitionError, Error, error_message
from xmlexact.definition import is_metadata_key, split_qualified_name
from xmlexact.deserialization import from_xml
from xmlexact.node import NAMESPACE_KEY
from xmlexact.options import FromXmlOptions

LOGGER = logging.getLogger(__name__)

#: Namespace of the XML Schema itself, where the built-in types live
XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

#: Levels of type references followed before giving up
MAX_TYPE_REFERENCE_DEPTH = 3

#: Definition used to parse the schema so that the declarations are always lists
SCHEMA_DEFINITION = {
    "schema": {
        "element$type": [],
        "simpleType$type": [],
        "complexType$type": [],
    }
}

# NOTE: These children do not tell anything about the structure of the content.
_NON_STRUCTURAL = frozenset(
    ["annotation", "attribute", "attributeGroup", "anyAttribute"]
)


# region Navigation in the parsed schema


def _nodes(value: Any) -> List[Mapping[str, Any]]:
    """Normalize a singular or a repeated child to a list of nodes."""
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        return [item if isinstance(item, Mapping) else dict() for item in value]

    if isinstance(value, Mapping):
        return [value]

    # An empty element without attributes is parsed as an empty string.
    return [dict()]


def _first(node: Mapping[str, Any], name: str) -> Optional[Mapping[str, Any]]:
    nodes = _nodes(node.get(name, None))
    return nodes[0] if len(nodes) > 0 else None


def _attribute(node: Mapping[str, Any], name: str) -> Optional[str]:
    value = node.get(f"${name}", None)
    return None if value is None else str(value)


def _structural_children(node: Mapping[str, Any]) -> List[str]:
    """List the names of the children which define the content of ``node``."""
    return [
        key
        for key in node
        if not key.startswith("$")
        and key != NAMESPACE_KEY
        and not is_metadata_key(key)
        and key not in _NON_STRUCTURAL
    ]


def _declarations(node: Mapping[str, Any]) -> Dict[str, str]:
    """Collect the namespace declarations of ``node`` as alias → URL."""
    result = dict()  # type: Dict[str, str]
    for key, value in node.items():
        if key == "$xmlns":
            result[""] = str(value)
        elif key.startswith("$xmlns:"):
            result[key[len("$xmlns:") :]] = str(value)

    return result


def _with_declarations(
    aliases: Mapping[str, str], node: Mapping[str, Any]
) -> Mapping[str, str]:
    declarations = _declarations(node)
    if len(declarations) == 0:
        return aliases

    return {**aliases, **declarations}


# endregion


def _normalize_namespaces(namespaces: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """
    Map the aliases to the namespace URLs.

    The aliases can be given either as ``xmlns:alias`` or plainly as ``alias``.
    """
    result = dict()  # type: Dict[str, str]
    if namespaces is None:
        return result

    for key, value in namespaces.items():
        if key == "xmlns":
            result[""] = value
        elif key.startswith("xmlns:"):
            result[key[len("xmlns:") :]] = value
        else:
            result[key] = value

    return result


class _QualifiedName:
    """Represent a name resolved to its namespace URL."""

    def __init__(self, namespace: str, name: str) -> None:
        """Initialize with the given values."""
        self.namespace = namespace
        self.name = name


def _resolve(
    reference: str, aliases: Mapping[str, str]
) -> Tuple[Optional[_QualifiedName], Optional[Error]]:
    """Resolve the namespace alias of a reference such as ``xs:string``."""
    prefix, local = split_qualified_name(reference)
    if prefix is None:
        return _QualifiedName(namespace=aliases.get("", ""), name=local), None

    namespace = aliases.get(prefix, None)
    if namespace is None:
        return None, Error(f"Could not find namespace alias '{reference}'")

    return _QualifiedName(namespace=namespace, name=local), None


class _Context:
    """Hold what is shared among all the declarations of a schema."""

    def __init__(
        self,
        target_namespace: str,
        target_alias: str,
        qualified: bool,
        simple_types: Mapping[Tuple[str, str], Mapping[str, Any]],
        complex_types: Mapping[Tuple[str, str], Mapping[str, Any]],
        elements: Mapping[Tuple[str, str], Mapping[str, Any]],
    ) -> None:
        """Initialize with the given values."""
        self.target_namespace = target_namespace
        self.target_alias = target_alias
        self.qualified = qualified
        self.simple_types = simple_types
        self.complex_types = complex_types
        self.elements = elements


class _Restriction:
    """Represent what a simple type states about the scalar values."""

    def __init__(
        self, base: Optional[str], min_length: int, max_length: int
    ) -> None:
        """Initialize with the given values."""
        self.base = base
        self.min_length = min_length
        self.max_length = max_length


def _translate_simple_type(
    simple_type: Mapping[str, Any]
) -> Tuple[Optional[_Restriction], Optional[Error]]:
    """Read the base type and the length constraints of a simple type."""
    restriction = _first(simple_type, "restriction")
    if restriction is not None:
        min_length = 0
        max_length = 0

        length = _first(restriction, "length")
        if length is not None:
            min_length = max_length = int(_attribute(length, "value") or 0)
        else:
            max_length_node = _first(restriction, "maxLength")
            if max_length_node is not None:
                max_length = int(_attribute(max_length_node, "value") or 0)

            min_length_node = _first(restriction, "minLength")
            if min_length_node is not None:
                min_length = int(_attribute(min_length_node, "value") or 0)

        return (
            _Restriction(
                base=_attribute(restriction, "base"),
                min_length=min_length,
                max_length=max_length,
            ),
            None,
        )

    list_node = _first(simple_type, "list")
    if list_node is not None:
        return (
            _Restriction(
                base=_attribute(list_node, "itemType"), min_length=0, max_length=0
            ),
            None,
        )

    return None, Error("Unknown simpleType structure")


def _translate_complex_type(
    complex_type: Mapping[str, Any],
    aliases: Mapping[str, str],
    context: _Context,
) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
    """
    Translate the content of a complex type.

    The result maps the children to their definitions. The special keys ``$type``
    and ``$order`` concern the complex type itself.
    """
    aliases = _with_declarations(aliases, complex_type)

    result = dict()  # type: Dict[str, Any]
    elements = []  # type: List[Mapping[str, Any]]

    group = None  # type: Optional[Mapping[str, Any]]
    for group_name in ("all", "choice"):
        group = _first(complex_type, group_name)
        if group is not None:
            elements = _nodes(group.get("element", None))
            break

    if group is None:
        sequence = _first(complex_type, "sequence")
        if sequence is not None:
            if "element" in sequence:
                elements = _nodes(sequence["element"])
            elif "any" in sequence:
                result["$type"] = "any"
            else:
                return None, Error("Unknown complexType sequence structure")

            result["$order"] = []

        elif len(_structural_children(complex_type)) == 0:
            result["$type"] = "empty"

        else:
            return None, Error(
                f"Unknown complexType structure with the content: "
                f"{', '.join(_structural_children(complex_type))}"
            )

    errors = []  # type: List[Error]
    for element in elements:
        element_definition, element_name, error = _translate_element(
            element=element, aliases=aliases, context=context, top_level=False
        )
        if error is not None:
            errors.append(error)
            continue

        assert element_definition is not None
        assert element_name is not None

        result.update(element_definition)
        if "$order" in result:
            result["$order"].append(element_name)

    if len(errors) > 0:
        return None, Error("Failed to translate the complex type", errors)

    return result, None


# fmt: off
@ensure(
    lambda result:
    (result[0] is not None and result[1] is not None) ^ (result[2] is not None)
)
# fmt: on
def _translate_element(
    element: Mapping[str, Any],
    aliases: Mapping[str, str],
    context: _Context,
    top_level: bool,
) -> Tuple[Optional[Dict[str, Any]], Optional[str], Optional[Error]]:
    """Translate an element declaration into the definition entries of its name."""
    aliases = _with_declarations(aliases, element)

    reference = _attribute(element, "ref")
    if reference is not None:
        qualified_name, error = _resolve(reference, aliases)
        if error is not None:
            return None, None, error

        assert qualified_name is not None
        referenced = context.elements.get(
            (qualified_name.namespace, qualified_name.name), None
        )
        if referenced is None:
            return (
                None,
                None,
                Error(
                    f"Could not find element '{qualified_name.name}' "
                    f"in namespace '{qualified_name.namespace}'"
                ),
            )

        # The occurrences are stated at the reference, not at the declaration.
        merged = dict(referenced)
        for key in ("$minOccurs", "$maxOccurs"):
            if key in element:
                merged[key] = element[key]
            else:
                merged.pop(key, None)

        return _translate_element(
            element=merged, aliases=aliases, context=context, top_level=top_level
        )

    name = _attribute(element, "name")
    if name is None:
        return None, None, Error("Unknown element structure without a name")

    type_tag = None  # type: Optional[Any]
    children = None  # type: Optional[Dict[str, Any]]
    type_reference = None  # type: Optional[str]
    min_length = 0
    max_length = 0

    # region Determine the type

    simple_type = _first(element, "simpleType")
    complex_type = _first(element, "complexType")

    if _attribute(element, "type") is not None:
        type_reference = _attribute(element, "type")

    elif simple_type is not None:
        restriction, error = _translate_simple_type(simple_type)
        if error is not None:
            return None, None, Error(f"Failed to translate the element {name!r}", [error])

        assert restriction is not None
        type_reference = restriction.base
        min_length = restriction.min_length
        max_length = restriction.max_length

    elif complex_type is not None:
        children, error = _translate_complex_type(complex_type, aliases, context)
        if error is not None:
            return None, None, Error(f"Failed to translate the element {name!r}", [error])

    elif len(_structural_children(element)) == 0:
        type_tag = "any"

    else:
        return (
            None,
            None,
            Error(
                f"Unknown element structure of {name!r} with the content: "
                f"{', '.join(_structural_children(element))}"
            ),
        )

    # endregion

    # region Follow the type references

    depth = 0
    while type_reference is not None:
        if depth == MAX_TYPE_REFERENCE_DEPTH:
            return (
                None,
                None,
                Error(
                    f"Type reference nested more than {MAX_TYPE_REFERENCE_DEPTH} "
                    f"levels in the element {name!r}"
                ),
            )
        depth += 1

        qualified_name, error = _resolve(type_reference, aliases)
        if error is not None:
            return None, None, Error(f"Failed to translate the element {name!r}", [error])

        assert qualified_name is not None
        key = (qualified_name.namespace, qualified_name.name)
        type_reference = None

        if qualified_name.namespace == XSD_NAMESPACE:
            type_tag = qualified_name.name
            break

        LOGGER.debug(
            "Resolving the type %r of the element %r", qualified_name.name, name
        )

        if key in context.complex_types:
            children, error = _translate_complex_type(
                context.complex_types[key], aliases, context
            )
            if error is not None:
                return (
                    None,
                    None,
                    Error(f"Failed to translate the element {name!r}", [error]),
                )
            break

        elif key in context.simple_types:
            restriction, error = _translate_simple_type(context.simple_types[key])
            if error is not None:
                return (
                    None,
                    None,
                    Error(f"Failed to translate the element {name!r}", [error]),
                )

            assert restriction is not None
            type_reference = restriction.base
            if restriction.max_length > 0:
                min_length = restriction.min_length
                max_length = restriction.max_length

        else:
            return (
                None,
                None,
                Error(
                    f"Could not find type '{qualified_name.name}' "
                    f"in namespace '{qualified_name.namespace}'"
                ),
            )

    # endregion

    result = dict()  # type: Dict[str, Any]

    if children is not None:
        if "$type" in children:
            result[f"{name}$type"] = children["$type"]
        else:
            nested = dict()  # type: Dict[str, Any]
            for key_in_children, value in children.items():
                if key_in_children.startswith("$"):
                    result[f"{name}{key_in_children}"] = value
                else:
                    nested[key_in_children] = value
            result[name] = nested

    elif type_tag is not None:
        result[f"{name}$type"] = type_tag

    if context.qualified or top_level:
        result[f"{name}$namespace"] = context.target_alias

    # region Occurrences

    max_occurs_text = _attribute(element, "maxOccurs")
    min_occurs = int(_attribute(element, "minOccurs") or 1)

    if max_occurs_text == "unbounded":
        result[f"{name}$type"] = [result.get(f"{name}$type", None), min_occurs, None]
    elif max_occurs_text is not None and int(max_occurs_text) > 1:
        result[f"{name}$type"] = [
            result.get(f"{name}$type", None),
            min_occurs,
            int(max_occurs_text),
        ]

    # endregion

    if max_length > 0:
        result[f"{name}$length"] = [min_length, max_length]

    return result, name, None


def _translate_schema(
    schema: Mapping[str, Any], namespaces: Mapping[str, str]
) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
    """Translate every top-level element of the ``schema``."""
    target_namespace = _attribute(schema, "targetNamespace")
    if target_namespace is None:
        return None, Error("The schema does not define a targetNamespace")

    target_alias = None  # type: Optional[str]
    for alias, url in namespaces.items():
        if url == target_namespace:
            target_alias = alias

    if target_alias is None:
        return None, Error(
            f"Unable to find alias for target namespace: '{target_namespace}'"
        )

    simple_types = {
        (target_namespace, _attribute(node, "name") or ""): node
        for node in _nodes(schema.get("simpleType", None))
    }
    complex_types = {
        (target_namespace, _attribute(node, "name") or ""): node
        for node in _nodes(schema.get("complexType", None))
    }
    top_level_elements = _nodes(schema.get("element", None))
    elements = {
        (target_namespace, _attribute(node, "name") or ""): node
        for node in top_level_elements
    }

    context = _Context(
        target_namespace=target_namespace,
        target_alias=target_alias,
        qualified=_attribute(schema, "elementFormDefault") == "qualified",
        simple_types=simple_types,
        complex_types=complex_types,
        elements=elements,
    )

    aliases = _with_declarations(namespaces, schema)

    result = dict()  # type: Dict[str, Any]
    errors = []  # type: List[Error]

    for element in top_level_elements:
        element_aliases = _with_declarations(aliases, element)

        definition, name, error = _translate_element(
            element=element, aliases=aliases, context=context, top_level=True
        )
        if error is not None:
            errors.append(error)
            continue

        assert definition is not None
        assert name is not None

        declarations = {
            ("xmlns" if alias == "" else f"xmlns:{alias}"): url
            for alias, url in element_aliases.items()
            if url != XSD_NAMESPACE
        }
        if len(declarations) > 0:
            result[f"{name}$attributes"] = declarations

        result.update(definition)

    if len(errors) > 0:
        return None, Error("Failed to translate the schema", errors)

    return result, None


def infer_from_xsd(
    xsd_or_obj: Union[str, bytes, Mapping[str, Any]],
    namespaces: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Translate the XML Schema into a definition.

    The ``namespaces`` map the aliases to be used in the definition (given as
    ``xmlns:alias`` or ``alias``) to the namespace URLs. The target namespace of
    the schema must be among them.

    :raise: :py:class:`DefinitionError` if the schema could not be translated
    """
    if isinstance(xsd_or_obj, Mapping):
        obj = xsd_or_obj
    else:
        obj = from_xml(
            xsd_or_obj,
            definition=SCHEMA_DEFINITION,
            options=FromXmlOptions(inline_attributes=True, convert_types=False),
        )

    schema = obj.get("schema", None)
    if not isinstance(schema, Mapping):
        raise DefinitionError(
            f"Expected the root element to be a schema, but got: "
            f"{', '.join(key for key in obj if '$' not in key)}"
        )

    definition, error = _translate_schema(schema, _normalize_namespaces(namespaces))
    if error is not None:
        raise DefinitionError(error_message(error))

    assert definition is not None
    return definition
