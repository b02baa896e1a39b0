"""astroid-backed parser and resolver collaborators."""

from collections import deque

import astroid
from astroid import bases
from astroid.builder import AstroidBuilder
from astroid.exceptions import AstroidError

from bugmatch.domain.exceptions import SourceParseError
from bugmatch.domain.protocols import ResolverProtocol
from bugmatch.domain.types import MemberKind, MemberRef, TypeRef

# Anything astroid may throw while inferring code it cannot follow.
_RESOLUTION_ERRORS = (AstroidError, AttributeError, RecursionError)

_MEMBER_KINDS: dict[str, MemberKind] = {
    "method": MemberKind.INSTANCE,
    "classmethod": MemberKind.CLASS,
    "staticmethod": MemberKind.STATIC,
}


def parse_source(text: str, module_name: str = "", path: str | None = None) -> astroid.nodes.Module:
    """
    Build an astroid tree for ``text``.

    Unlike ``astroid.parse`` the text is not dedented, so node positions
    line up with the buffer the caller keeps.
    """
    try:
        return AstroidBuilder(astroid.MANAGER).string_build(text, modname=module_name, path=path)
    except AstroidError as exc:
        raise SourceParseError(f"Cannot parse {path or module_name or '<string>'}: {exc}") from exc


class AstroidResolver(ResolverProtocol):
    """
    Static type and symbol resolution through astroid inference.

    Explicit annotations (parameters, annotated assignments) are read first;
    inference is the fallback. Every failure resolves to ``None``.
    """

    def static_type(self, node: astroid.nodes.NodeNG) -> TypeRef | None:
        try:
            annotated = self._annotated_type(node)
            if annotated is not None:
                return annotated
            return self._inferred_type(node)
        except _RESOLUTION_ERRORS:
            return None

    def supertypes(self, type_ref: TypeRef) -> tuple[TypeRef, ...]:
        """Breadth-first transitive closure over direct bases; cycles are cut."""
        cls = self._class_of(type_ref)
        if cls is None:
            return ()
        seen = {cls.qname()}
        closure: list[TypeRef] = []
        queue = deque([cls])
        while queue:
            current = queue.popleft()
            try:
                direct = list(current.ancestors(recurs=False))
            except _RESOLUTION_ERRORS:
                continue
            for base in direct:
                qname = base.qname()
                if qname in seen:
                    continue
                seen.add(qname)
                closure.append(TypeRef(qname, declaration=base))
                queue.append(base)
        return tuple(closure)

    def invoked_member(self, call: astroid.nodes.Call) -> MemberRef | None:
        func = getattr(call, "func", None)
        if not isinstance(func, astroid.nodes.Attribute):
            return None
        receiver_type = self.static_type(func.expr)
        cls = self._class_of(receiver_type) if receiver_type else None
        if cls is None:
            return None
        try:
            candidates = cls.getattr(func.attrname)
        except _RESOLUTION_ERRORS:
            return None
        for candidate in candidates:
            if isinstance(candidate, astroid.nodes.FunctionDef):
                return self._member_ref(candidate)
        return None

    def receiver(self, call: astroid.nodes.Call) -> astroid.nodes.NodeNG | None:
        func = getattr(call, "func", None)
        if isinstance(func, astroid.nodes.Attribute):
            return func.expr
        return None

    def _annotated_type(self, node: astroid.nodes.NodeNG) -> TypeRef | None:
        """Read the declared annotation of the variable or parameter a Name refers to."""
        if not isinstance(node, astroid.nodes.Name):
            return None
        _, assignments = node.lookup(node.name)
        for assignment in assignments:
            annotation = self._declared_annotation(assignment)
            if annotation is not None:
                return self._annotation_type(annotation)
        return None

    def _declared_annotation(self, assignment: astroid.nodes.NodeNG) -> astroid.nodes.NodeNG | None:
        parent = assignment.parent
        if isinstance(parent, astroid.nodes.Arguments):
            groups = (
                (parent.posonlyargs, parent.posonlyargs_annotations),
                (parent.args, parent.annotations),
                (parent.kwonlyargs, parent.kwonlyargs_annotations),
            )
            for params, annotations in groups:
                for param, annotation in zip(params or [], annotations or []):
                    if param is assignment:
                        return annotation
            return None
        if isinstance(parent, astroid.nodes.AnnAssign) and parent.target is assignment:
            return parent.annotation
        return None

    def _annotation_type(self, annotation: astroid.nodes.NodeNG) -> TypeRef | None:
        for inferred in annotation.infer():
            if isinstance(inferred, astroid.nodes.ClassDef):
                return TypeRef(inferred.qname(), declaration=inferred)
        return None

    def _inferred_type(self, node: astroid.nodes.NodeNG) -> TypeRef | None:
        """The single type every inferred value agrees on; ``None`` when they disagree."""
        found: TypeRef | None = None
        for inferred in node.infer():
            if inferred is astroid.Uninferable:
                continue
            type_ref = self._type_of_value(inferred)
            if type_ref is None or (found is not None and type_ref != found):
                return None
            found = found or type_ref
        return found

    def _type_of_value(self, inferred: astroid.nodes.NodeNG) -> TypeRef | None:
        if isinstance(inferred, astroid.nodes.ClassDef):
            return TypeRef(inferred.qname(), is_class_object=True, declaration=inferred)
        if isinstance(inferred, bases.Instance):
            return TypeRef(inferred.pytype(), declaration=inferred._proxied)
        return None

    def _class_of(self, type_ref: TypeRef | None) -> astroid.nodes.ClassDef | None:
        if type_ref is None:
            return None
        if isinstance(type_ref.declaration, astroid.nodes.ClassDef):
            return type_ref.declaration
        module_name, _, class_name = type_ref.qualified_name.rpartition(".")
        if not module_name:
            return None
        try:
            module = astroid.MANAGER.ast_from_module_name(module_name)
            found = module.getattr(class_name)
        except _RESOLUTION_ERRORS:
            return None
        for candidate in found:
            if isinstance(candidate, astroid.nodes.ClassDef):
                return candidate
        return None

    def _member_ref(self, function: astroid.nodes.FunctionDef) -> MemberRef | None:
        owner = function.parent.frame() if function.parent is not None else None
        if not isinstance(owner, astroid.nodes.ClassDef):
            return None
        try:
            kind = _MEMBER_KINDS.get(function.type)
        except _RESOLUTION_ERRORS:
            return None
        if kind is None:
            return None
        arguments = function.args
        annotations = [
            *(arguments.posonlyargs_annotations or []),
            *(arguments.annotations or []),
        ]
        if kind is not MemberKind.STATIC and annotations:
            # self / cls
            annotations = annotations[1:]
        annotations.extend(arguments.kwonlyargs_annotations or [])
        parameter_types = tuple(self._parameter_type(annotation) for annotation in annotations)
        return MemberRef(
            name=function.name,
            owner=TypeRef(owner.qname(), declaration=owner),
            kind=kind,
            parameter_types=parameter_types,
        )

    def _parameter_type(self, annotation: astroid.nodes.NodeNG | None) -> str | None:
        if annotation is None:
            return None
        try:
            type_ref = self._annotation_type(annotation)
        except _RESOLUTION_ERRORS:
            return None
        return type_ref.qualified_name if type_ref else None
