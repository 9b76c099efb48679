import warnings


class ProblemParameters:
    """Container for the matrices and options defining dynamics, costs, and
    steering problems. Parameters are validated by a user-supplied function
    every time they are set."""
    def __init__(self, required=(), optional=(), update_fun=None, **params):
        """
        Parameters
        ----------
        required : iterable of strings, default=()
            Names of parameters which cannot be None.
        optional : iterable of strings, default=()
            Names of parameters which may be None. If either `required` or
            `optional` is non-empty, setting a parameter not named in one of
            these raises a `RuntimeWarning`.
        update_fun : callable, optional
            A function to execute whenever parameters are modified by `update`.
            The function must have the call signature `update_fun(obj, **params)`
            where `obj` refers to the `ProblemParameters` instance and `params`
            are the parameters being modified, specified as keyword arguments.
        **params : dict
            Parameters to set at initialization, as keyword arguments.
        """
        if update_fun is None:
            self._update_fun = lambda s, **p: None
        elif callable(update_fun):
            self._update_fun = update_fun
        else:
            raise TypeError("update_fun must be set with a callable")

        self._param_dict = dict()
        self._frozen = False
        self.required = set(required)
        self.optional = set(optional)

        overlap = self.required & self.optional
        if overlap:
            raise ValueError(f"{', '.join(sorted(overlap))} cannot be in both "
                             f"required and optional parameter lists")

        if len(params):
            self.update(**params)

    def update(self, check_required=True, **params):
        """
        Modify individual or multiple parameters using keyword arguments. This
        internally calls `self._update_fun(self, **params)`.

        Parameters
        ----------
        check_required : bool, default=True
            Ensure that all required parameters have been set (after updating).
        **params : dict
            Parameters to change, as keyword arguments.

        Raises
        ------
        RuntimeError
            If `check_required` is True and any of the parameters in
            `self.required` is None after updating, or if the container has
            been frozen and `params` is non-empty.
        """
        if self._frozen and params:
            raise RuntimeError(f"Parameters are read-only, cannot update "
                               f"{', '.join(sorted(params))}")

        known = self.required | self.optional
        if known:
            for key in params:
                if key not in known:
                    warnings.warn(f"{key} is not in the required or optional "
                                  f"parameter lists", category=RuntimeWarning)

        self._param_dict.update(params)
        self.__dict__.update(params)

        if check_required:
            for p in self.required:
                if getattr(self, p, None) is None:
                    raise RuntimeError(f"{p} is required but has not been set")

        self._update_fun(self, **params)

    def freeze(self):
        """Make the container read-only, so that any later call to `update`
        which changes parameters raises a `RuntimeError`."""
        self._frozen = True

    def as_dict(self):
        """
        Return all named parameters in the form of a dict.

        Returns
        -------
        parameter_dict : dict
            Dict containing all parameters set using `__init__` or `update`,
            after processing by `update_fun`.
        """
        return {key: getattr(self, key) for key in self._param_dict}
