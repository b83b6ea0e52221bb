"""Tests for dependency graph construction."""

from layerlint.config import AnalysisConfig
from layerlint.graph.builder import build_dependency_graph
from layerlint.policy import default_policy
from layerlint.scanning.index import SourceIndexer
from layerlint.scanning.syntax_extractor import SyntaxExtractor


def _graph(root):
    policy = default_policy()
    settings = AnalysisConfig(workers=1)
    index = SourceIndexer(root, policy, settings).build()
    extracted = SyntaxExtractor(policy, settings).extract_all(index)
    return build_dependency_graph(extracted, index, policy)


def _pairs(graph):
    return [(e.source.name, e.target.name, e.target.feature) for e in graph.edges]


class TestResolution:
    """Candidate references become edges between declared units."""

    def test_resolved_edge_carries_layers_and_features(self, project):
        root = project(
            {
                "auth/repositories/booking_repository.dart": """
                    class BookingRepository {
                      final LocalBookingDataSource source;
                      final Widget unused;
                    }
                """,
                "auth/data_sources/local_booking_data_source.dart": "class LocalBookingDataSource {}",
            }
        )
        graph = _graph(root)
        (edge,) = graph.edges
        assert (edge.source.name, edge.target.name) == ("BookingRepository", "LocalBookingDataSource")
        assert (edge.source_layer, edge.target_layer) == ("REPOSITORY_IMPL", "DATA_SOURCE")
        assert (edge.source_feature, edge.target_feature) == ("auth", "auth")
        assert not edge.cross_feature
        assert edge.line == 2
        # Widget is a library type
        assert graph.unresolved_count == 1

    def test_same_feature_declaration_is_preferred(self, project):
        root = project(
            {
                "auth/dtos/user_dto.dart": "class UserDTO {}",
                "common/dtos/user_dto.dart": "class UserDTO {}",
                "auth/data_sources/user_data_source.dart": "class UserDataSource { UserDTO u; }",
                "shop/data_sources/shop_data_source.dart": "class ShopDataSource { UserDTO u; }",
            }
        )
        assert sorted(_pairs(_graph(root))) == [
            ("ShopDataSource", "UserDTO", "common"),
            ("UserDataSource", "UserDTO", "auth"),
        ]

    def test_ambiguous_name_links_every_candidate(self, project):
        root = project(
            {
                "auth/dtos/token_dto.dart": "class TokenDTO {}",
                "shop/dtos/token_dto.dart": "class TokenDTO {}",
                "cart/data_sources/cart_data_source.dart": "class CartDataSource { TokenDTO t; }",
            }
        )
        assert _pairs(_graph(root)) == [
            ("CartDataSource", "TokenDTO", "auth"),
            ("CartDataSource", "TokenDTO", "shop"),
        ]


class TestSelfReferences:
    """References inside one logical file produce no edge."""

    def test_same_file_and_private_names(self, project):
        root = project(
            {
                "auth/screens/login_screen.dart": """
                    class LoginScreen {
                      _LoginScreenState createState() => _LoginScreenState();
                    }
                    class _LoginScreenState {
                      LoginScreen get widget => throw 0;
                    }
                """,
                "shop/screens/_hidden.dart": "class _LoginScreenState {}",
            }
        )
        assert _graph(root).edges == ()

    def test_part_group_members_do_not_link(self, project):
        root = project(
            {
                "auth/views/profile_view.dart": """
                    part 'profile_view_components.dart';
                    class ProfileView { ProfileHeader header; }
                """,
                "auth/views/profile_view_components.dart": """
                    part of 'profile_view.dart';
                    class ProfileHeader {}
                """,
            }
        )
        assert _graph(root).edges == ()

    def test_edges_are_deduplicated(self, project):
        root = project(
            {
                "auth/cubits/login_cubit.dart": """
                    class LoginCubit {
                      LoginState a;
                      LoginState b;
                    }
                """,
                "auth/states/login_state.dart": "class LoginState {}",
            }
        )
        graph = _graph(root)
        assert len(graph.edges) == 1
        assert graph.edges[0].line == 2
