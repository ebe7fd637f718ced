"""
Built-in Go templates, keyed by logical name.

Templates of mergeable artifacts render only one entity's declarations;
the surrounding package clause, imports and delimiters come from the layer
generator so the merge writer can splice them into an existing file.
"""

DOMAIN_ENTITY_TEMPLATE = """\
package domain
{% if imports %}

import (
{% for imp in imports %}
\t"{{ imp }}"
{% endfor %}
)
{% endif %}

type {{ entity }} struct {
{% for field in fields %}
\t{{ field.name }} {{ field.go_type }} `{{ field.tag }}`
{% endfor %}
}
{% if validation %}

func ({{ receiver }} *{{ entity }}) Validate() error {
{% for check in checks %}
\tif {{ check.condition }} {
\t\treturn {{ check.error }}
\t}
{% endfor %}
\treturn nil
}
{% endif %}
{% for rule in business_rules %}

func ({{ receiver }} *{{ entity }}) {{ rule.name }}() bool {
\treturn {{ rule.expression }}
}
{% endfor %}
{% if soft_delete %}

func ({{ receiver }} *{{ entity }}) SoftDelete() {
\tnow := time.Now()
\t{{ receiver }}.DeletedAt = &now
}

func ({{ receiver }} *{{ entity }}) IsDeleted() bool {
\treturn {{ receiver }}.DeletedAt != nil
}
{% endif %}
"""

USECASE_DTO_TEMPLATE = """\

type Create{{ entity }}Input struct {
{% for field in user_fields %}
\t{{ field.name }} {{ field.go_type }} `json:"{{ field.json_name }}"{% if validation and plans[field.name].validation_rule %} validate:"{{ plans[field.name].validation_rule }}"{% endif %}`
{% endfor %}
}

type Create{{ entity }}Output struct {
\t{{ entity }} domain.{{ entity }} `json:"{{ entity | snake }}"`
\tMessage string `json:"message"`
}

type Update{{ entity }}Input struct {
{% for field in user_fields %}
\t{{ field.name }} *{{ field.go_type }} `json:"{{ field.json_name }},omitempty"{% if validation and plans[field.name].validation_rule %} validate:"{{ plans[field.name].validation_rule | optional_rule }}"{% endif %}`
{% endfor %}
}

type List{{ entity }}Output struct {
\t{{ entity_plural }} []domain.{{ entity }} `json:"{{ entity_plural | snake }}"`
\tTotal int `json:"total"`
\tMessage string `json:"message"`
}
"""

REPOSITORY_INTERFACE_TEMPLATE = """\

type {{ entity }}Repository interface {
\tSave({{ entity_var }} *domain.{{ entity }}) error
\tFindByID(id uint) (*domain.{{ entity }}, error)
{% for method in search_methods %}
\t{{ method.method_name }}({{ method.field_name | param }} {{ method.field_type }}) {{ method.return_type(entity) }}
{% endfor %}
\tUpdate({{ entity_var }} *domain.{{ entity }}) error
\tDelete(id uint) error
\tFindAll() ([]domain.{{ entity }}, error)
{% if transactions %}
\tSaveWithTx(tx *gorm.DB, {{ entity_var }} *domain.{{ entity }}) error
\tUpdateWithTx(tx *gorm.DB, {{ entity_var }} *domain.{{ entity }}) error
\tDeleteWithTx(tx *gorm.DB, id uint) error
{% endif %}
}
"""

HANDLER_TEMPLATE = """\
package http

import (
\t"encoding/json"
\t"net/http"
\t"strconv"

\t"github.com/gorilla/mux"
\t"{{ module }}/internal/domain"
\t"{{ module }}/internal/usecase"
)

// {{ entity }}Service is the use case port the handler depends on.
type {{ entity }}Service interface {
\tCreate{{ entity }}(input usecase.Create{{ entity }}Input) (*usecase.Create{{ entity }}Output, error)
\tGet{{ entity }}(id uint) (*domain.{{ entity }}, error)
\tUpdate{{ entity }}(id uint, input usecase.Update{{ entity }}Input) error
\tDelete{{ entity }}(id uint) error
\tList{{ entity_plural }}() (*usecase.List{{ entity }}Output, error)
}

type {{ entity }}Handler struct {
\tservice {{ entity }}Service
}

func New{{ entity }}Handler(service {{ entity }}Service) *{{ entity }}Handler {
\treturn &{{ entity }}Handler{service: service}
}

func Register{{ entity }}Routes(r *mux.Router, h *{{ entity }}Handler) {
\tr.HandleFunc("/{{ route }}", h.Create{{ entity }}).Methods(http.MethodPost)
\tr.HandleFunc("/{{ route }}", h.List{{ entity_plural }}).Methods(http.MethodGet)
\tr.HandleFunc("/{{ route }}/{id}", h.Get{{ entity }}).Methods(http.MethodGet)
\tr.HandleFunc("/{{ route }}/{id}", h.Update{{ entity }}).Methods(http.MethodPut)
\tr.HandleFunc("/{{ route }}/{id}", h.Delete{{ entity }}).Methods(http.MethodDelete)
}

func (h *{{ entity }}Handler) Create{{ entity }}(w http.ResponseWriter, r *http.Request) {
\tvar input usecase.Create{{ entity }}Input
\tif err := json.NewDecoder(r.Body).Decode(&input); err != nil {
\t\thttp.Error(w, "Invalid request body", http.StatusBadRequest)
\t\treturn
\t}

\toutput, err := h.service.Create{{ entity }}(input)
\tif err != nil {
\t\thttp.Error(w, err.Error(), http.StatusInternalServerError)
\t\treturn
\t}

\twrite{{ entity }}JSON(w, http.StatusCreated, output)
}

func (h *{{ entity }}Handler) Get{{ entity }}(w http.ResponseWriter, r *http.Request) {
\tid, err := parse{{ entity }}ID(r)
\tif err != nil {
\t\thttp.Error(w, "Invalid {{ entity | lower }} ID", http.StatusBadRequest)
\t\treturn
\t}

\t{{ entity_var }}, err := h.service.Get{{ entity }}(id)
\tif err != nil {
\t\thttp.Error(w, err.Error(), http.StatusNotFound)
\t\treturn
\t}

\twrite{{ entity }}JSON(w, http.StatusOK, {{ entity_var }})
}

func (h *{{ entity }}Handler) Update{{ entity }}(w http.ResponseWriter, r *http.Request) {
\tid, err := parse{{ entity }}ID(r)
\tif err != nil {
\t\thttp.Error(w, "Invalid {{ entity | lower }} ID", http.StatusBadRequest)
\t\treturn
\t}

\tvar input usecase.Update{{ entity }}Input
\tif err := json.NewDecoder(r.Body).Decode(&input); err != nil {
\t\thttp.Error(w, "Invalid request body", http.StatusBadRequest)
\t\treturn
\t}

\tif err := h.service.Update{{ entity }}(id, input); err != nil {
\t\thttp.Error(w, err.Error(), http.StatusInternalServerError)
\t\treturn
\t}

\tw.WriteHeader(http.StatusNoContent)
}

func (h *{{ entity }}Handler) Delete{{ entity }}(w http.ResponseWriter, r *http.Request) {
\tid, err := parse{{ entity }}ID(r)
\tif err != nil {
\t\thttp.Error(w, "Invalid {{ entity | lower }} ID", http.StatusBadRequest)
\t\treturn
\t}

\tif err := h.service.Delete{{ entity }}(id); err != nil {
\t\thttp.Error(w, err.Error(), http.StatusInternalServerError)
\t\treturn
\t}

\tw.WriteHeader(http.StatusNoContent)
}

func (h *{{ entity }}Handler) List{{ entity_plural }}(w http.ResponseWriter, r *http.Request) {
\toutput, err := h.service.List{{ entity_plural }}()
\tif err != nil {
\t\thttp.Error(w, err.Error(), http.StatusInternalServerError)
\t\treturn
\t}

\twrite{{ entity }}JSON(w, http.StatusOK, output)
}

func parse{{ entity }}ID(r *http.Request) (uint, error) {
\tid, err := strconv.ParseUint(mux.Vars(r)["id"], 10, 64)
\tif err != nil {
\t\treturn 0, err
\t}
\treturn uint(id), nil
}

func write{{ entity }}JSON(w http.ResponseWriter, status int, payload interface{}) {
\tw.Header().Set("Content-Type", "application/json")
\tw.WriteHeader(status)
\tjson.NewEncoder(w).Encode(payload)
}
"""

MESSAGES_ERRORS_TEMPLATE = """
\t// {{ entity }} errors
\tErr{{ entity }}NotFound = "{{ entity_label }} not found"
\tErr{{ entity }}AlreadyExists = "{{ entity_label }} already exists"
\tErrInvalid{{ entity }}Data = "invalid {{ entity_label }} data"
{% for field in user_fields %}
{% if plans[field.name].validation_rule and plans[field.name].validation_rule.startswith("required") %}
\tErr{{ entity }}{{ field.name }}Required = "{{ entity_label }} {{ field.name | snake | replace("_", " ") }} is required"
{% endif %}
{% endfor %}
\tErr{{ entity }}UpdateFailed = "failed to update {{ entity_label }}"
\tErr{{ entity }}DeleteFailed = "failed to delete {{ entity_label }}"
"""

MESSAGES_RESPONSES_TEMPLATE = """
\t// {{ entity }} success messages
\t{{ entity }}CreatedSuccessfully = "{{ entity_label }} created successfully"
\t{{ entity }}UpdatedSuccessfully = "{{ entity_label }} updated successfully"
\t{{ entity }}DeletedSuccessfully = "{{ entity_label }} deleted successfully"
\t{{ entity }}FoundSuccessfully = "{{ entity_label }} found successfully"
\t{{ entity_plural }}ListedSuccessfully = "{{ entity_plural_label }} listed successfully"
"""

CONSTANTS_TEMPLATE = """
\t// {{ entity }} constants
\t{{ entity }}TableName = "{{ table_name }}"
\t{{ entity }}Endpoint = "/{{ route }}"
\t{{ entity }}CachePrefix = "{{ entity | snake }}:"
\tDefault{{ entity }}PerPage = 20
\tMax{{ entity }}PerPage = 100
{% for field in user_fields %}
\t{{ entity }}{{ field.name }}Column = "{{ field.column }}"
{% endfor %}
"""

BUILTIN_TEMPLATES = {
    "domain/entity": DOMAIN_ENTITY_TEMPLATE,
    "usecase/dto": USECASE_DTO_TEMPLATE,
    "repository/interface": REPOSITORY_INTERFACE_TEMPLATE,
    "handler/http/handler": HANDLER_TEMPLATE,
    "messages/errors": MESSAGES_ERRORS_TEMPLATE,
    "messages/responses": MESSAGES_RESPONSES_TEMPLATE,
    "constants/constants": CONSTANTS_TEMPLATE,
}
